from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from mangaverse import db
from mangaverse.errors import NotFoundError, PermissionDenied, ValidationError
from mangaverse.logger import get_logger
from mangaverse.models.chapter import CHAPTER_STATUSES, Chapter
from mangaverse.models.chapter_interaction import ChapterLike, ChapterUnlock, ChapterView
from mangaverse.models.comment import Comment
from mangaverse.models.reading_progress import ReadingHistory, ReadingProgress
from mangaverse.models.transaction import Transaction
from mangaverse.repositories.chapter_repository import ChapterRepository
from mangaverse.repositories.reading_progress_repository import ReadingProgressRepository
from mangaverse.repositories.series_repository import SeriesRepository
from mangaverse.services import upload_service
from mangaverse.services.user_service import reading_streak


logger = get_logger(__name__)


def _parse_datetime(value, field):
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        raise ValidationError(f"{field} must be an ISO 8601 datetime")


class ChapterService:
    def __init__(self, chapter_repository=None, series_repository=None, progress_repository=None):
        self.chapter_repository = chapter_repository or ChapterRepository()
        self.series_repository = series_repository or SeriesRepository()
        self.progress_repository = progress_repository or ReadingProgressRepository()

    def _get_series(self, series_id):
        series = self.series_repository.get_by_id(series_id)
        if series is None:
            raise NotFoundError("Series not found")
        return series

    def get_chapter(self, chapter_id):
        chapter = self.chapter_repository.get_by_id(chapter_id)
        if chapter is None:
            raise NotFoundError("Chapter not found")
        return chapter

    @staticmethod
    def _is_owner(user, series):
        return user is not None and (user.id == series.author_id or user.is_admin)

    def list_chapters_for_series(self, series_id, viewer=None):
        series = self._get_series(series_id)
        chapters = self.chapter_repository.get_for_series(series.id)
        if not self._is_owner(viewer, series):
            chapters = [c for c in chapters if c.status != "scheduled"]
        return chapters

    def is_locked(self, chapter, viewer):
        if not chapter.is_premium:
            return False
        if viewer is None:
            return True
        if self._is_owner(viewer, chapter.series):
            return False
        return not self.chapter_repository.is_unlocked(viewer.id, chapter.id)

    def get_chapter_for_reader(self, chapter_id, viewer=None):
        chapter = self.get_chapter(chapter_id)
        series = chapter.series
        if chapter.status == "scheduled" and not self._is_owner(viewer, series):
            raise NotFoundError("Chapter not found")

        locked = self.is_locked(chapter, viewer)
        visible = [c for c in self.list_chapters_for_series(series.id, viewer)]
        prev_chapter = None
        next_chapter = None
        for i, ch in enumerate(visible):
            if ch.id == chapter.id:
                if i > 0:
                    prev_chapter = visible[i - 1]
                if i < len(visible) - 1:
                    next_chapter = visible[i + 1]
                break

        data = chapter.to_dict(include_content=not locked)
        data["isLocked"] = locked
        data["previousChapterId"] = prev_chapter.id if prev_chapter else None
        data["nextChapterId"] = next_chapter.id if next_chapter else None
        data["series"] = series.to_dict(include_author=False)

        self.track_view(chapter, viewer, record_history=not locked)
        return data

    def track_view(self, chapter, viewer=None, record_history=True):
        # View tracking must never block reading.
        try:
            if viewer is None or not self.chapter_repository.has_viewed(viewer.id, chapter.id):
                self.chapter_repository.add_view(chapter.id, viewer.id if viewer else None)
                chapter.view_count = (chapter.view_count or 0) + 1
                chapter.series.view_count = (chapter.series.view_count or 0) + 1
            if viewer is not None and record_history:
                self.progress_repository.add_history(viewer.id, chapter.series_id, chapter.id)
                viewer.chapters_read = (viewer.chapters_read or 0) + 1
                viewer.last_read_at = datetime.utcnow()
                db.session.flush()
                dates = self.progress_repository.history_dates(viewer.id)
                viewer.reading_streak = reading_streak(dates)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.warning("Could not track view for chapter %s", chapter.id, exc_info=True)

    def _check_premium(self, user, status, coin_price):
        if status != "premium":
            return
        threshold = current_app.config["PREMIUM_FOLLOWER_THRESHOLD"]
        if not user.is_admin and (user.followers_count or 0) < threshold:
            raise PermissionDenied(
                f"Premium chapters require at least {threshold} followers",
                followersRequired=threshold,
            )
        if coin_price <= 0:
            raise ValidationError("Premium chapters need a coin price above zero")

    def create_chapter(self, user, series_id, data, page_files=None):
        series = self._get_series(series_id)
        if series.author_id != user.id:
            raise PermissionDenied("Unauthorized")

        number = data.get("chapterNumber")
        try:
            number = int(number)
        except (TypeError, ValueError):
            raise ValidationError("Chapter number is required")
        if number < 1:
            raise ValidationError("Chapter number must be at least 1")
        if self.chapter_repository.get_by_number(series.id, number) is not None:
            raise ValidationError(f"Chapter {number} already exists")

        status = data.get("status") or "free"
        if status not in CHAPTER_STATUSES:
            raise ValidationError("Status must be one of: " + ", ".join(CHAPTER_STATUSES))
        try:
            coin_price = int(data.get("coinPrice") or 0)
        except (TypeError, ValueError):
            raise ValidationError("coinPrice must be an integer")
        if coin_price < 0:
            raise ValidationError("coinPrice must not be negative")
        self._check_premium(user, status, coin_price)

        published_at = _parse_datetime(data.get("publishedAt"), "publishedAt")
        if status != "scheduled":
            published_at = published_at or datetime.utcnow()

        title = (data.get("title") or "").strip() or f"Chapter {number}"

        content = None
        if page_files:
            content = upload_service.save_images(page_files, prefix=f"ch{number}")
        if not content:
            text = data.get("content")
            # Page lists only come from uploaded files.
            content = text if isinstance(text, str) and text.strip() else None
        if not content:
            raise ValidationError("Chapter content is required")

        chapter = Chapter(
            series_id=series.id,
            title=title,
            chapter_number=number,
            content=content,
            status=status,
            coin_price=coin_price if status == "premium" else 0,
            published_at=published_at,
        )
        self.chapter_repository.add(chapter)
        series.chapter_count = (series.chapter_count or 0) + 1
        series.updated_at = datetime.utcnow()
        db.session.commit()
        logger.info("Created chapter %s (#%s) in series %s", chapter.id, number, series.id)
        return chapter

    @staticmethod
    def _updated_content(chapter, content):
        if isinstance(content, str):
            return content
        if isinstance(content, list) and isinstance(chapter.content, list):
            # Pages may be reordered or dropped, never pointed at other files.
            if all(isinstance(url, str) and url in chapter.content for url in content):
                return content
        raise ValidationError("Content must be text or a subset of the chapter's pages")

    def update_chapter(self, user, chapter_id, data):
        chapter = self.get_chapter(chapter_id)
        if not self._is_owner(user, chapter.series):
            raise PermissionDenied("Unauthorized")
        if "title" in data:
            title = (data.get("title") or "").strip()
            if not title:
                raise ValidationError("Title is required")
            chapter.title = title
        if "chapterNumber" in data:
            try:
                number = int(data["chapterNumber"])
            except (TypeError, ValueError):
                raise ValidationError("Chapter number must be an integer")
            if number < 1:
                raise ValidationError("Chapter number must be at least 1")
            existing = self.chapter_repository.get_by_number(chapter.series_id, number)
            if existing is not None and existing.id != chapter.id:
                raise ValidationError(f"Chapter {number} already exists")
            chapter.chapter_number = number
        if "content" in data and data["content"]:
            chapter.content = self._updated_content(chapter, data["content"])
        status = data.get("status", chapter.status)
        if status not in CHAPTER_STATUSES:
            raise ValidationError("Status must be one of: " + ", ".join(CHAPTER_STATUSES))
        try:
            coin_price = int(data.get("coinPrice", chapter.coin_price) or 0)
        except (TypeError, ValueError):
            raise ValidationError("coinPrice must be an integer")
        if status == "premium" and (chapter.status != "premium" or coin_price != chapter.coin_price):
            self._check_premium(user, status, coin_price)
        chapter.status = status
        chapter.coin_price = coin_price if status == "premium" else 0
        if "publishedAt" in data:
            chapter.published_at = _parse_datetime(data.get("publishedAt"), "publishedAt")
        if chapter.status != "scheduled" and chapter.published_at is None:
            chapter.published_at = datetime.utcnow()
        chapter.series.updated_at = datetime.utcnow()
        db.session.commit()
        return chapter

    def purge_chapter(self, chapter):
        """Delete a chapter and every row that points at it."""
        comment_ids = [c.id for c in Comment.query.filter_by(chapter_id=chapter.id).all()]
        if comment_ids:
            Comment.query.filter(Comment.id.in_(comment_ids)).update(
                {Comment.parent_id: None}, synchronize_session=False
            )
            Comment.query.filter(Comment.id.in_(comment_ids)).delete(synchronize_session=False)
            db.session.expire(chapter, ["comments"])
        ChapterLike.query.filter_by(chapter_id=chapter.id).delete()
        ChapterView.query.filter_by(chapter_id=chapter.id).delete()
        ChapterUnlock.query.filter_by(chapter_id=chapter.id).delete()
        ReadingProgress.query.filter_by(chapter_id=chapter.id).delete()
        ReadingHistory.query.filter_by(chapter_id=chapter.id).delete()
        Transaction.query.filter_by(chapter_id=chapter.id).update({Transaction.chapter_id: None})
        if isinstance(chapter.content, list):
            upload_service.remove_uploads(chapter.content)
        self.chapter_repository.delete(chapter)

    def delete_chapter(self, user, chapter_id):
        chapter = self.get_chapter(chapter_id)
        series = chapter.series
        if not self._is_owner(user, series):
            raise PermissionDenied("Unauthorized")
        self.purge_chapter(chapter)
        series.chapter_count = max(0, (series.chapter_count or 0) - 1)
        series.updated_at = datetime.utcnow()
        db.session.commit()

    def reorder_chapters(self, user, series_id, chapter_ids):
        series = self._get_series(series_id)
        if not self._is_owner(user, series):
            raise PermissionDenied("Unauthorized")
        if not isinstance(chapter_ids, list) or not chapter_ids:
            raise ValidationError("chapterIds must be a non-empty list")
        chapters = {c.id: c for c in self.chapter_repository.get_for_series(series.id)}
        if len(chapter_ids) != len(set(chapter_ids)) or set(chapter_ids) != set(chapters):
            raise ValidationError("chapterIds must list every chapter of the series exactly once")
        # Two passes keep the (series, number) unique constraint satisfied.
        for i, cid in enumerate(chapter_ids):
            chapters[cid].chapter_number = -(i + 1)
        db.session.flush()
        for i, cid in enumerate(chapter_ids):
            chapters[cid].chapter_number = i + 1
        series.updated_at = datetime.utcnow()
        db.session.commit()
        return self.chapter_repository.get_for_series(series.id)

    def toggle_like(self, user, chapter_id):
        chapter = self.get_chapter(chapter_id)
        existing = self.chapter_repository.get_like(user.id, chapter.id)
        if existing is not None:
            db.session.delete(existing)
            is_liked = False
        else:
            db.session.add(ChapterLike(user_id=user.id, chapter_id=chapter.id))
            is_liked = True
        db.session.flush()
        chapter.like_count = self.chapter_repository.count_likes(chapter.id)
        db.session.commit()
        return {"isLiked": is_liked, "likeCount": chapter.like_count}

    def like_status(self, user, chapter_id):
        chapter = self.get_chapter(chapter_id)
        return {
            "isLiked": self.chapter_repository.get_like(user.id, chapter.id) is not None,
            "likeCount": chapter.like_count,
        }
