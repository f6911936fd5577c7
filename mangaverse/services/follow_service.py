from mangaverse import db
from mangaverse.errors import NotFoundError, ValidationError
from mangaverse.logger import get_logger
from mangaverse.models.follow import FOLLOW_TARGET_TYPES
from mangaverse.repositories.follow_repository import FollowRepository
from mangaverse.repositories.series_repository import SeriesRepository
from mangaverse.repositories.user_repository import UserRepository


logger = get_logger(__name__)


class FollowService:
    def __init__(self, follow_repository=None, user_repository=None, series_repository=None):
        self.follow_repository = follow_repository or FollowRepository()
        self.user_repository = user_repository or UserRepository()
        self.series_repository = series_repository or SeriesRepository()

    def _validate(self, user, target_id, target_type):
        if not target_id or not target_type:
            raise ValidationError("Target ID and type are required")
        if target_type not in FOLLOW_TARGET_TYPES:
            raise ValidationError("Target type must be 'user' or 'series'")
        if target_type == "user":
            if target_id == user.id:
                raise ValidationError("You cannot follow yourself")
            if self.user_repository.get_by_id(target_id) is None:
                raise NotFoundError("User not found")
        elif self.series_repository.get_by_id(target_id) is None:
            raise NotFoundError("Series not found")

    def follow(self, user, target_id, target_type):
        self._validate(user, target_id, target_type)
        if self.follow_repository.get(user.id, target_id, target_type) is not None:
            raise ValidationError("Already following")
        follow = self.follow_repository.add(user.id, target_id, target_type)
        if target_type == "user":
            self.user_repository.adjust_followers(target_id, 1)
        db.session.commit()
        logger.info("User %s followed %s %s", user.id, target_type, target_id)
        return follow

    def unfollow(self, user, target_id, target_type):
        if not target_id or not target_type:
            raise ValidationError("Target ID and type are required")
        follow = self.follow_repository.get(user.id, target_id, target_type)
        if follow is None:
            return False
        self.follow_repository.delete(follow)
        if target_type == "user":
            self.user_repository.adjust_followers(target_id, -1)
        db.session.commit()
        return True

    def is_following(self, user, target_id, target_type="user"):
        return self.follow_repository.get(user.id, target_id, target_type) is not None

    def followed_series(self, user):
        ids = self.follow_repository.target_ids(user.id, "series")
        return self.series_repository.get_many(ids)

    def followers(self, user_id):
        if self.user_repository.get_by_id(user_id) is None:
            raise NotFoundError("User not found")
        return self.user_repository.get_many(self.follow_repository.follower_ids(user_id, "user"))

    def following(self, user_id):
        if self.user_repository.get_by_id(user_id) is None:
            raise NotFoundError("User not found")
        return self.user_repository.get_many(self.follow_repository.target_ids(user_id, "user"))
