from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso, new_id


SERIES_TYPES = ("webtoon", "manga", "novel")
SERIES_STATUSES = ("ongoing", "completed", "hiatus")


class Series(db.Model):
    __tablename__ = "series"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    cover_image_url = db.Column(db.String(512), nullable=True)
    type = db.Column(db.Enum(*SERIES_TYPES, name="series_type"), nullable=False)
    status = db.Column(db.Enum(*SERIES_STATUSES, name="series_status"), nullable=False, default="ongoing")
    author_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    group_id = db.Column(db.String(36), db.ForeignKey("groups.id"), nullable=True)
    genres = db.Column(db.JSON, nullable=False, default=list)
    tags = db.Column(db.JSON, nullable=False, default=list)
    is_nsfw = db.Column(db.Boolean, nullable=False, default=False)
    view_count = db.Column(db.Integer, nullable=False, default=0)
    like_count = db.Column(db.Integer, nullable=False, default=0)
    bookmark_count = db.Column(db.Integer, nullable=False, default=0)
    rating = db.Column(db.Numeric(3, 2), nullable=False, default=0)
    rating_count = db.Column(db.Integer, nullable=False, default=0)
    chapter_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    author = db.relationship("User", backref="series", lazy="joined")
    group = db.relationship("Group", back_populates="series")
    chapters = db.relationship(
        "Chapter",
        back_populates="series",
        lazy="select",
        order_by="Chapter.chapter_number",
        cascade="all, delete-orphan",
    )

    def to_dict(self, include_author=True):
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "coverImageUrl": self.cover_image_url,
            "type": self.type,
            "status": self.status,
            "authorId": self.author_id,
            "groupId": self.group_id,
            "genres": self.genres or [],
            "tags": self.tags or [],
            "isNSFW": self.is_nsfw,
            "viewCount": self.view_count,
            "likeCount": self.like_count,
            "bookmarkCount": self.bookmark_count,
            "rating": "%.2f" % float(self.rating or 0),
            "ratingCount": self.rating_count,
            "chapterCount": self.chapter_count,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if include_author and self.author is not None:
            data["author"] = self.author.to_dict()
        return data
