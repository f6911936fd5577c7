from mangaverse import db
from mangaverse.models.bookmark import Bookmark, BookmarkFolder


class BookmarkRepository:
    def get(self, user_id, series_id):
        return Bookmark.query.filter_by(user_id=user_id, series_id=series_id).first()

    def get_for_user(self, user_id):
        return (
            Bookmark.query.filter_by(user_id=user_id)
            .order_by(Bookmark.created_at.desc())
            .all()
        )

    def add(self, user_id, series_id, folder_id=None):
        bookmark = Bookmark(user_id=user_id, series_id=series_id, folder_id=folder_id)
        db.session.add(bookmark)
        db.session.flush()
        return bookmark

    def delete(self, bookmark):
        db.session.delete(bookmark)

    def get_folder(self, folder_id):
        return BookmarkFolder.query.get(folder_id)

    def get_folder_by_name(self, user_id, name):
        return BookmarkFolder.query.filter_by(user_id=user_id, name=name).first()

    def get_folders(self, user_id):
        return (
            BookmarkFolder.query.filter_by(user_id=user_id)
            .order_by(BookmarkFolder.name.asc())
            .all()
        )

    def add_folder(self, user_id, name):
        folder = BookmarkFolder(user_id=user_id, name=name)
        db.session.add(folder)
        db.session.flush()
        return folder
