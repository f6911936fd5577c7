from mangaverse import db
from mangaverse.models.chapter import Chapter
from mangaverse.models.chapter_interaction import ChapterLike, ChapterUnlock, ChapterView


class ChapterRepository:
    def get_for_series(self, series_id):
        return (
            Chapter.query.filter_by(series_id=series_id)
            .order_by(Chapter.chapter_number.asc())
            .all()
        )

    def get_by_id(self, chapter_id):
        return Chapter.query.get(chapter_id)

    def get_by_number(self, series_id, chapter_number):
        return Chapter.query.filter_by(series_id=series_id, chapter_number=chapter_number).first()

    def count_for_series(self, series_id):
        return Chapter.query.filter_by(series_id=series_id).count()

    def add(self, chapter):
        db.session.add(chapter)
        db.session.flush()
        return chapter

    def delete(self, chapter):
        db.session.delete(chapter)

    def is_unlocked(self, user_id, chapter_id):
        return ChapterUnlock.query.filter_by(user_id=user_id, chapter_id=chapter_id).first() is not None

    def add_unlock(self, user_id, chapter_id):
        unlock = ChapterUnlock(user_id=user_id, chapter_id=chapter_id)
        db.session.add(unlock)
        return unlock

    def get_like(self, user_id, chapter_id):
        return ChapterLike.query.filter_by(user_id=user_id, chapter_id=chapter_id).first()

    def count_likes(self, chapter_id):
        return ChapterLike.query.filter_by(chapter_id=chapter_id).count()

    def has_viewed(self, user_id, chapter_id):
        return ChapterView.query.filter_by(user_id=user_id, chapter_id=chapter_id).first() is not None

    def add_view(self, chapter_id, user_id=None):
        db.session.add(ChapterView(chapter_id=chapter_id, user_id=user_id))

