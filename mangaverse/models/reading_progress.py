from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso, new_id


class ReadingProgress(db.Model):
    __tablename__ = "reading_progress"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    series_id = db.Column(db.String(36), db.ForeignKey("series.id"), nullable=False)
    chapter_id = db.Column(db.String(36), db.ForeignKey("chapters.id"), nullable=False)
    progress = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "series_id", "chapter_id", name="uq_reading_progress_user_series_chapter"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "seriesId": self.series_id,
            "chapterId": self.chapter_id,
            "progress": "%.2f" % float(self.progress or 0),
            "updatedAt": iso(self.updated_at),
        }


class ReadingHistory(db.Model):
    __tablename__ = "reading_history"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    chapter_id = db.Column(db.String(36), db.ForeignKey("chapters.id"), nullable=False)
    series_id = db.Column(db.String(36), db.ForeignKey("series.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
