from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso, new_id


FOLLOW_TARGET_TYPES = ("user", "series")


class Follow(db.Model):
    __tablename__ = "follows"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    target_id = db.Column(db.String(36), nullable=False, index=True)
    target_type = db.Column(db.String(16), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "target_id", "target_type", name="uq_follow_user_target"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "targetId": self.target_id,
            "targetType": self.target_type,
            "createdAt": iso(self.created_at),
        }
