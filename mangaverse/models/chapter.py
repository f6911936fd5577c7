from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso, new_id


CHAPTER_STATUSES = ("free", "premium", "scheduled")


class Chapter(db.Model):
    __tablename__ = "chapters"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    series_id = db.Column(db.String(36), db.ForeignKey("series.id"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    chapter_number = db.Column(db.Integer, nullable=False)
    content = db.Column(db.JSON, nullable=True)
    status = db.Column(db.Enum(*CHAPTER_STATUSES, name="chapter_status"), nullable=False, default="free")
    coin_price = db.Column(db.Integer, nullable=False, default=0)
    view_count = db.Column(db.Integer, nullable=False, default=0)
    like_count = db.Column(db.Integer, nullable=False, default=0)
    published_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    series = db.relationship("Series", back_populates="chapters")

    __table_args__ = (
        db.UniqueConstraint("series_id", "chapter_number", name="uq_chapter_series_number"),
    )

    @property
    def is_premium(self):
        return self.status == "premium"

    def to_dict(self, include_content=True):
        data = {
            "id": self.id,
            "seriesId": self.series_id,
            "title": self.title,
            "chapterNumber": self.chapter_number,
            "status": self.status,
            "coinPrice": self.coin_price,
            "viewCount": self.view_count,
            "likeCount": self.like_count,
            "publishedAt": iso(self.published_at),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        data["content"] = self.content if include_content else None
        return data
