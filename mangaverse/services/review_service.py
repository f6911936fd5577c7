from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from mangaverse import db
from mangaverse.errors import NotFoundError, ValidationError
from mangaverse.models.review import Review
from mangaverse.repositories.review_repository import ReviewRepository
from mangaverse.repositories.series_repository import SeriesRepository


class ReviewService:
    def __init__(self, review_repository=None, series_repository=None):
        self.review_repository = review_repository or ReviewRepository()
        self.series_repository = series_repository or SeriesRepository()

    def _get_series(self, series_id):
        series = self.series_repository.get_by_id(series_id)
        if series is None:
            raise NotFoundError("Series not found")
        return series

    def list_reviews(self, series_id):
        series = self._get_series(series_id)
        return self.review_repository.get_for_series(series.id)

    def add_review(self, user, series_id, rating, content=None):
        series = self._get_series(series_id)
        try:
            rating = int(rating)
        except (TypeError, ValueError):
            raise ValidationError("Rating must be an integer between 1 and 5")
        if rating < 1 or rating > 5:
            raise ValidationError("Rating must be an integer between 1 and 5")
        if self.review_repository.get_for_user(series.id, user.id) is not None:
            raise ValidationError("You have already reviewed this series")

        review = Review(
            series_id=series.id,
            user_id=user.id,
            rating=rating,
            content=(content or "").strip() or None,
        )
        self.review_repository.add(review)

        average, count = self.review_repository.rating_summary(series.id)
        series.rating = Decimal(str(average)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        series.rating_count = count
        series.updated_at = datetime.utcnow()
        db.session.commit()
        return review
