from datetime import datetime

from mangaverse import db
from mangaverse.errors import NotFoundError, PermissionDenied, ValidationError
from mangaverse.logger import get_logger
from mangaverse.models.bookmark import Bookmark
from mangaverse.models.follow import Follow
from mangaverse.models.reading_progress import ReadingHistory, ReadingProgress
from mangaverse.models.series import SERIES_STATUSES, SERIES_TYPES, Series
from mangaverse.repositories.chapter_repository import ChapterRepository
from mangaverse.repositories.group_repository import GroupRepository
from mangaverse.repositories.series_repository import SeriesRepository
from mangaverse.repositories.user_repository import UserRepository
from mangaverse.services import upload_service


logger = get_logger(__name__)


def _filter_genre(items, genre):
    if not genre:
        return items
    wanted = genre.strip().lower()
    return [s for s in items if wanted in [g.lower() for g in (s.genres or [])]]


class SeriesService:
    def __init__(self, series_repository=None, chapter_repository=None,
                 user_repository=None, group_repository=None):
        self.series_repository = series_repository or SeriesRepository()
        self.chapter_repository = chapter_repository or ChapterRepository()
        self.user_repository = user_repository or UserRepository()
        self.group_repository = group_repository or GroupRepository()

    def get_series(self, series_id):
        series = self.series_repository.get_by_id(series_id)
        if series is None:
            raise NotFoundError("Series not found")
        return series

    def list_series(self, series_type=None, status=None, genre=None, limit=None):
        # Unknown enum values are ignored rather than rejected.
        series_type = series_type if series_type in SERIES_TYPES else None
        status = status if status in SERIES_STATUSES else None
        items = self.series_repository.list(series_type=series_type, status=status)
        items = _filter_genre(items, genre)
        return items[:limit] if limit else items

    def trending(self, limit=10):
        return self.series_repository.trending(limit)

    def rising(self, limit=12):
        return self.series_repository.rising(limit)

    def search(self, query, series_type=None, status=None, genre=None):
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query is required")
        series_type = series_type if series_type in SERIES_TYPES else None
        status = status if status in SERIES_STATUSES else None
        items = self.series_repository.search(query, series_type=series_type, status=status)
        return _filter_genre(items, genre)

    def search_all(self, query):
        return {
            "series": self.search(query),
            "creators": self.user_repository.search_creators(query.strip()),
        }

    def list_for_author(self, author_id):
        return self.series_repository.get_for_author(author_id)

    def _require_owner(self, user, series):
        if series.author_id != user.id and not user.is_admin:
            raise PermissionDenied("Unauthorized")

    def _resolve_group(self, user, group_id):
        if not group_id:
            return None
        group = self.group_repository.get_by_id(group_id)
        if group is None:
            raise NotFoundError("Group not found")
        if self.group_repository.get_membership(group.id, user.id) is None:
            raise PermissionDenied("Not a member of this group")
        return group

    def create_series(self, user, data, genres=None, tags=None, cover_file=None):
        if not user.is_creator:
            raise PermissionDenied("Creator account required")
        title = (data.get("title") or "").strip()
        if not title:
            raise ValidationError("Title is required")
        series_type = data.get("type")
        if series_type not in SERIES_TYPES:
            raise ValidationError("Type must be one of: " + ", ".join(SERIES_TYPES))
        status = data.get("status") or "ongoing"
        if status not in SERIES_STATUSES:
            raise ValidationError("Status must be one of: " + ", ".join(SERIES_STATUSES))
        group = self._resolve_group(user, data.get("groupId"))

        cover_url = upload_service.external_image_url(data.get("coverImageUrl"))
        if cover_file is not None and cover_file.filename:
            cover_url = upload_service.save_image(cover_file, prefix="cover")

        series = Series(
            title=title,
            description=(data.get("description") or "").strip() or None,
            cover_image_url=cover_url,
            type=series_type,
            status=status,
            author_id=user.id,
            group_id=group.id if group else None,
            genres=genres or [],
            tags=tags or [],
            is_nsfw=bool(data.get("isNSFW", False)),
        )
        self.series_repository.add(series)
        if group is not None:
            group.series_count = (group.series_count or 0) + 1
        db.session.commit()
        logger.info("User %s created series %s", user.id, series.id)
        return series

    def update_series(self, user, series_id, data, genres=None, tags=None, cover_file=None):
        series = self.get_series(series_id)
        self._require_owner(user, series)
        if "title" in data:
            title = (data.get("title") or "").strip()
            if not title:
                raise ValidationError("Title is required")
            series.title = title
        if "description" in data:
            series.description = (data.get("description") or "").strip() or None
        if "type" in data:
            if data["type"] not in SERIES_TYPES:
                raise ValidationError("Type must be one of: " + ", ".join(SERIES_TYPES))
            series.type = data["type"]
        if "status" in data:
            if data["status"] not in SERIES_STATUSES:
                raise ValidationError("Status must be one of: " + ", ".join(SERIES_STATUSES))
            series.status = data["status"]
        if "isNSFW" in data:
            series.is_nsfw = bool(data["isNSFW"])
        if genres is not None:
            series.genres = genres
        if tags is not None:
            series.tags = tags
        if cover_file is not None and cover_file.filename:
            old_cover = series.cover_image_url
            series.cover_image_url = upload_service.save_image(cover_file, prefix="cover")
            upload_service.remove_uploads([old_cover])
        series.updated_at = datetime.utcnow()
        db.session.commit()
        return series

    def delete_series(self, user, series_id, chapter_service):
        series = self.get_series(series_id)
        self._require_owner(user, series)
        for chapter in list(series.chapters):
            chapter_service.purge_chapter(chapter)
        Bookmark.query.filter_by(series_id=series.id).delete()
        Follow.query.filter_by(target_id=series.id, target_type="series").delete()
        ReadingProgress.query.filter_by(series_id=series.id).delete()
        ReadingHistory.query.filter_by(series_id=series.id).delete()
        if series.group is not None:
            series.group.series_count = max(0, (series.group.series_count or 0) - 1)
        cover = series.cover_image_url
        self.series_repository.delete(series)
        db.session.commit()
        upload_service.remove_uploads([cover])
        logger.info("User %s deleted series %s", user.id, series_id)
