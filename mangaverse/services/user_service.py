import json
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import IntegrityError

from mangaverse import db
from mangaverse.errors import NotFoundError, ValidationError
from mangaverse.models.chapter_interaction import ChapterLike
from mangaverse.repositories.bookmark_repository import BookmarkRepository
from mangaverse.repositories.follow_repository import FollowRepository
from mangaverse.repositories.reading_progress_repository import ReadingProgressRepository
from mangaverse.repositories.user_repository import UserRepository
from mangaverse.services.auth_service import validate_email


PROFILE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "profileImageUrl": "profile_image_url",
}


def user_badges(user):
    cfg = current_app.config
    badges = []
    if user.is_creator:
        badges.append("creator")
    if user.is_elite_reader:
        badges.append("elite_reader")
    followers = user.followers_count or 0
    if followers > cfg["POPULAR_FOLLOWER_THRESHOLD"]:
        badges.append("popular")
    if followers > cfg["VERIFIED_FOLLOWER_THRESHOLD"]:
        badges.append("verified")
    return badges


def reading_streak(dates, today=None):
    """Count consecutive days with reading activity ending today or yesterday."""
    today = today or datetime.utcnow().date()
    days = set(dates)
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


class UserService:
    def __init__(self, user_repository=None, follow_repository=None,
                 bookmark_repository=None, progress_repository=None):
        self.user_repository = user_repository or UserRepository()
        self.follow_repository = follow_repository or FollowRepository()
        self.bookmark_repository = bookmark_repository or BookmarkRepository()
        self.progress_repository = progress_repository or ReadingProgressRepository()

    def get_user(self, user_id):
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def public_profile(self, user_id):
        user = self.get_user(user_id)
        data = user.to_dict()
        data["badges"] = user_badges(user)
        data["followingCount"] = self.follow_repository.count_following(user.id)
        data["seriesCount"] = len(user.series)
        return data

    def update_profile(self, user, data):
        for key, attr in PROFILE_FIELDS.items():
            if key in data:
                value = data.get(key)
                setattr(user, attr, (str(value).strip() or None) if value is not None else None)
        if "email" in data:
            email = validate_email(data.get("email"))
            existing = self.user_repository.get_by_email(email)
            if existing is not None and existing.id != user.id:
                raise ValidationError("Email already exists")
            if email.lower() != (user.email or "").lower():
                user.email = email
                user.email_verified = False
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError("Email already exists")
        return user

    def get_settings(self, user):
        return user.get_settings()

    def update_settings(self, user, settings):
        if not isinstance(settings, dict):
            raise ValidationError("Settings must be an object")
        user.settings = json.dumps(settings)
        db.session.commit()
        return settings

    def profile_stats(self, user):
        week_ago = datetime.utcnow() - timedelta(days=7)
        dates = self.progress_repository.history_dates(user.id)
        streak = reading_streak(dates)
        if user.reading_streak != streak:
            # Streaks lapse without new reads.
            user.reading_streak = streak
            db.session.commit()
        return {
            "totalChaptersRead": self.progress_repository.count_history(user.id),
            "chaptersReadThisWeek": self.progress_repository.count_history(user.id, since=week_ago),
            "readingStreak": streak,
            "seriesFollowed": len(self.follow_repository.target_ids(user.id, "series")),
            "usersFollowed": self.follow_repository.count_following(user.id),
            "totalLikesGiven": ChapterLike.query.filter_by(user_id=user.id).count(),
            "bookmarks": len(self.bookmark_repository.get_for_user(user.id)),
            "lastReadDate": dates[0].isoformat() if dates else None,
        }
