from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso, new_id


class BookmarkFolder(db.Model):
    __tablename__ = "bookmark_folders"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "name", name="uq_bookmark_folder_user_name"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "createdAt": iso(self.created_at),
        }


class Bookmark(db.Model):
    __tablename__ = "bookmarks"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    series_id = db.Column(db.String(36), db.ForeignKey("series.id"), nullable=False)
    folder_id = db.Column(db.String(36), db.ForeignKey("bookmark_folders.id"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "series_id", name="uq_bookmark_user_series"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "seriesId": self.series_id,
            "folderId": self.folder_id,
            "createdAt": iso(self.created_at),
        }
