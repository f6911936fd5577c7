from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso, new_id


TRANSACTION_TYPES = ("purchase", "unlock", "reward", "spend")


class Transaction(db.Model):
    __tablename__ = "transactions"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    type = db.Column(db.String(16), nullable=False)
    amount = db.Column(db.Integer, nullable=False)
    chapter_id = db.Column(db.String(36), db.ForeignKey("chapters.id"), nullable=True)
    description = db.Column(db.Text, nullable=True)
    reference = db.Column(db.String(255), unique=True, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "type": self.type,
            "amount": self.amount,
            "chapterId": self.chapter_id,
            "description": self.description,
            "createdAt": iso(self.created_at),
        }
