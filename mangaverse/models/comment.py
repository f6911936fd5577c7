from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso, new_id


class Comment(db.Model):
    __tablename__ = "comments"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    chapter_id = db.Column(db.String(36), db.ForeignKey("chapters.id"), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    content = db.Column(db.Text, nullable=False)
    parent_id = db.Column(db.String(36), db.ForeignKey("comments.id"), nullable=True)
    like_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User", backref="comments", lazy="joined")
    chapter = db.relationship("Chapter", backref="comments")
    replies = db.relationship(
        "Comment",
        backref=db.backref("parent", remote_side=[id]),
        order_by="Comment.created_at",
        lazy="select",
    )

    def to_dict(self, include_replies=False):
        data = {
            "id": self.id,
            "chapterId": self.chapter_id,
            "userId": self.user_id,
            "content": self.content,
            "parentId": self.parent_id,
            "likeCount": self.like_count,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
            "user": {"id": self.user.id, "username": self.user.username} if self.user else None,
        }
        if include_replies:
            data["replies"] = [r.to_dict(include_replies=True) for r in self.replies]
        return data
