from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso, new_id


class Review(db.Model):
    __tablename__ = "reviews"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    series_id = db.Column(db.String(36), db.ForeignKey("series.id"), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    content = db.Column(db.Text, nullable=True)
    like_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User", backref="reviews", lazy="joined")
    series = db.relationship("Series", backref=db.backref("reviews", cascade="all, delete-orphan"))

    __table_args__ = (
        db.UniqueConstraint("series_id", "user_id", name="uq_review_series_user"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "seriesId": self.series_id,
            "userId": self.user_id,
            "rating": self.rating,
            "content": self.content,
            "likeCount": self.like_count,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
            "user": self.user.to_dict() if self.user else None,
        }
