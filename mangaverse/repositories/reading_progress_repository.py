from datetime import datetime, timedelta

from mangaverse import db
from mangaverse.models.reading_progress import ReadingHistory, ReadingProgress


class ReadingProgressRepository:
    def get_progress(self, user_id, series_id, chapter_id):
        return ReadingProgress.query.filter_by(
            user_id=user_id,
            series_id=series_id,
            chapter_id=chapter_id,
        ).first()

    def upsert_progress(self, user_id, series_id, chapter_id, progress_value):
        progress = self.get_progress(user_id, series_id, chapter_id)
        if progress is None:
            progress = ReadingProgress(
                user_id=user_id,
                series_id=series_id,
                chapter_id=chapter_id,
                progress=progress_value,
            )
            db.session.add(progress)
        else:
            progress.progress = progress_value
            progress.updated_at = datetime.utcnow()
        db.session.commit()
        return progress

    def get_latest_for_series(self, user_id, series_id):
        return (
            ReadingProgress.query.filter_by(user_id=user_id, series_id=series_id)
            .order_by(ReadingProgress.updated_at.desc())
            .first()
        )

    def get_recent(self, user_id, limit=50):
        return (
            ReadingProgress.query.filter_by(user_id=user_id)
            .order_by(ReadingProgress.updated_at.desc())
            .limit(limit)
            .all()
        )

    def count_completed(self, user_id, series_id):
        return ReadingProgress.query.filter(
            ReadingProgress.user_id == user_id,
            ReadingProgress.series_id == series_id,
            ReadingProgress.progress >= 100,
        ).count()

    def add_history(self, user_id, series_id, chapter_id):
        entry = ReadingHistory(user_id=user_id, series_id=series_id, chapter_id=chapter_id)
        db.session.add(entry)
        return entry

    def count_history(self, user_id, since=None):
        query = ReadingHistory.query.filter_by(user_id=user_id)
        if since is not None:
            query = query.filter(ReadingHistory.created_at >= since)
        return query.count()

    def history_dates(self, user_id, days=365):
        since = datetime.utcnow() - timedelta(days=days)
        rows = (
            ReadingHistory.query.filter(
                ReadingHistory.user_id == user_id,
                ReadingHistory.created_at >= since,
            )
            .order_by(ReadingHistory.created_at.desc())
            .all()
        )
        return sorted({row.created_at.date() for row in rows}, reverse=True)
