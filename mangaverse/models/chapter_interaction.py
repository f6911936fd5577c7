from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso, new_id


class ChapterUnlock(db.Model):
    __tablename__ = "chapter_unlocks"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    chapter_id = db.Column(db.String(36), db.ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False)
    unlocked_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "chapter_id", name="uq_chapter_unlock_user_chapter"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "chapterId": self.chapter_id,
            "unlockedAt": iso(self.unlocked_at),
        }


class ChapterLike(db.Model):
    __tablename__ = "chapter_likes"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    chapter_id = db.Column(db.String(36), db.ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "chapter_id", name="uq_chapter_like_user_chapter"),
    )


class ChapterView(db.Model):
    __tablename__ = "chapter_views"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    chapter_id = db.Column(db.String(36), db.ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False, index=True)
    viewed_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
