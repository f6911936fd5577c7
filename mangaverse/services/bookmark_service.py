from mangaverse import db
from mangaverse.errors import NotFoundError, ValidationError
from mangaverse.repositories.bookmark_repository import BookmarkRepository
from mangaverse.repositories.series_repository import SeriesRepository


class BookmarkService:
    def __init__(self, bookmark_repository=None, series_repository=None):
        self.bookmark_repository = bookmark_repository or BookmarkRepository()
        self.series_repository = series_repository or SeriesRepository()

    def add_bookmark(self, user, series_id, folder_id=None):
        if not series_id:
            raise ValidationError("Series ID is required")
        series = self.series_repository.get_by_id(series_id)
        if series is None:
            raise NotFoundError("Series not found")
        if folder_id:
            folder = self.bookmark_repository.get_folder(folder_id)
            if folder is None or folder.user_id != user.id:
                raise NotFoundError("Folder not found")
        if self.bookmark_repository.get(user.id, series.id) is not None:
            raise ValidationError("Series already bookmarked")
        bookmark = self.bookmark_repository.add(user.id, series.id, folder_id or None)
        series.bookmark_count = (series.bookmark_count or 0) + 1
        db.session.commit()
        return bookmark

    def remove_bookmark(self, user, series_id):
        bookmark = self.bookmark_repository.get(user.id, series_id)
        if bookmark is None:
            return False
        self.bookmark_repository.delete(bookmark)
        series = self.series_repository.get_by_id(series_id)
        if series is not None:
            series.bookmark_count = max(0, (series.bookmark_count or 0) - 1)
        db.session.commit()
        return True

    def bookmarked_series(self, user):
        ids = [b.series_id for b in self.bookmark_repository.get_for_user(user.id)]
        return self.series_repository.get_many(ids)

    def list_folders(self, user):
        return self.bookmark_repository.get_folders(user.id)

    def create_folder(self, user, name):
        name = (name or "").strip()
        if not name:
            raise ValidationError("Folder name is required")
        if self.bookmark_repository.get_folder_by_name(user.id, name) is not None:
            raise ValidationError("Folder already exists")
        folder = self.bookmark_repository.add_folder(user.id, name)
        db.session.commit()
        return folder
