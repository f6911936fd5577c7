import json
from datetime import datetime

from flask import current_app

from mangaverse import db
from mangaverse.errors import ValidationError
from mangaverse.logger import get_logger
from mangaverse.repositories.series_repository import SeriesRepository
from mangaverse.repositories.transaction_repository import TransactionRepository


logger = get_logger(__name__)

CONTENT_TYPES = ("webtoon", "manga", "novel")


def premium_features(user):
    cfg = current_app.config
    followers = user.followers_count or 0
    return {
        "canEarnPremium": followers >= cfg["PREMIUM_FOLLOWER_THRESHOLD"],
        "hasAdRevenue": followers >= cfg["AD_REVENUE_FOLLOWER_THRESHOLD"],
    }


class CreatorService:
    def __init__(self, series_repository=None, transaction_repository=None):
        self.series_repository = series_repository or SeriesRepository()
        self.transaction_repository = transaction_repository or TransactionRepository()

    def apply(self, user, data):
        display_name = (data.get("displayName") or "").strip()
        bio = (data.get("bio") or "").strip()
        content_types = data.get("contentTypes") or []
        if not display_name or not bio or not content_types:
            raise ValidationError("Missing required fields")
        if not isinstance(content_types, list) or any(t not in CONTENT_TYPES for t in content_types):
            raise ValidationError("Content types must be a list of: " + ", ".join(CONTENT_TYPES))

        # Applications are approved immediately.
        user.creator_display_name = display_name
        user.creator_bio = bio
        user.creator_portfolio_url = data.get("portfolioUrl") or None
        user.creator_social_media_url = data.get("socialMediaUrl") or None
        user.creator_content_types = json.dumps(content_types)
        user.creator_experience = data.get("experience") or None
        user.creator_motivation = data.get("motivation") or None
        user.creator_application_status = "approved"
        user.creator_application_date = datetime.utcnow()
        user.is_creator = True
        db.session.commit()
        logger.info("User %s became a creator", user.id)
        return user

    def analytics(self, user):
        series = self.series_repository.get_for_author(user.id)
        data = {
            "totalViews": sum(s.view_count or 0 for s in series),
            "followers": user.followers_count or 0,
            "coinsEarned": self.transaction_repository.earned_from_unlocks(user.id),
            "activeSeries": len([s for s in series if s.status == "ongoing"]),
            "totalSeries": len(series),
            "totalChapters": sum(s.chapter_count or 0 for s in series),
        }
        data.update(premium_features(user))
        return data
