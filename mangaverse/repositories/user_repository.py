from sqlalchemy import func, or_

from mangaverse import db
from mangaverse.models.user import User


class UserRepository:
    def get_by_id(self, user_id):
        return User.query.get(user_id)

    def get_by_username(self, username):
        return User.query.filter(func.lower(User.username) == username.lower()).first()

    def get_by_email(self, email):
        return User.query.filter(func.lower(User.email) == email.lower()).first()

    def get_many(self, user_ids):
        if not user_ids:
            return []
        return User.query.filter(User.id.in_(user_ids)).all()

    def add(self, user):
        db.session.add(user)
        db.session.flush()
        return user

    def trending_creators(self, limit):
        return (
            User.query.filter_by(is_creator=True)
            .order_by(User.followers_count.desc())
            .limit(limit)
            .all()
        )

    def search_creators(self, query, limit=20):
        pattern = f"%{query}%"
        return (
            User.query.filter(
                User.is_creator.is_(True),
                or_(
                    User.username.ilike(pattern),
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.creator_display_name.ilike(pattern),
                    User.creator_bio.ilike(pattern),
                ),
            )
            .order_by(User.followers_count.desc())
            .limit(limit)
            .all()
        )

    def adjust_followers(self, user_id, delta):
        user = self.get_by_id(user_id)
        if user is None:
            return None
        user.followers_count = max(0, (user.followers_count or 0) + delta)
        return user
