from sqlalchemy import func

from mangaverse import db
from mangaverse.models.review import Review


class ReviewRepository:
    def get_for_series(self, series_id):
        return (
            Review.query.filter_by(series_id=series_id)
            .order_by(Review.created_at.desc())
            .all()
        )

    def get_for_user(self, series_id, user_id):
        return Review.query.filter_by(series_id=series_id, user_id=user_id).first()

    def rating_summary(self, series_id):
        avg, count = (
            db.session.query(func.avg(Review.rating), func.count(Review.id))
            .filter(Review.series_id == series_id)
            .one()
        )
        return float(avg or 0), int(count or 0)

    def add(self, review):
        db.session.add(review)
        db.session.flush()
        return review
