from mangaverse import db
from mangaverse.models.follow import Follow


class FollowRepository:
    def get(self, user_id, target_id, target_type):
        return Follow.query.filter_by(
            user_id=user_id,
            target_id=target_id,
            target_type=target_type,
        ).first()

    def add(self, user_id, target_id, target_type):
        follow = Follow(user_id=user_id, target_id=target_id, target_type=target_type)
        db.session.add(follow)
        db.session.flush()
        return follow

    def delete(self, follow):
        db.session.delete(follow)

    def target_ids(self, user_id, target_type):
        rows = Follow.query.filter_by(user_id=user_id, target_type=target_type).all()
        return [row.target_id for row in rows]

    def follower_ids(self, target_id, target_type):
        rows = Follow.query.filter_by(target_id=target_id, target_type=target_type).all()
        return [row.user_id for row in rows]

    def count_following(self, user_id, target_type="user"):
        return Follow.query.filter_by(user_id=user_id, target_type=target_type).count()
