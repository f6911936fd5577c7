import math

from mangaverse.errors import NotFoundError, ValidationError
from mangaverse.repositories.chapter_repository import ChapterRepository
from mangaverse.repositories.reading_progress_repository import (
    ReadingProgressRepository,
)
from mangaverse.repositories.series_repository import SeriesRepository


class ReadingProgressService:
    def __init__(self, repository=None, chapter_repository=None, series_repository=None):
        self.repository = repository or ReadingProgressRepository()
        self.chapter_repository = chapter_repository or ChapterRepository()
        self.series_repository = series_repository or SeriesRepository()

    def get_progress(self, user_id, series_id):
        return self.repository.get_latest_for_series(user_id, series_id)

    def save_progress(self, user_id, series_id, chapter_id, progress):
        if not series_id or not chapter_id or progress is None:
            raise ValidationError("Series ID, chapter ID, and progress are required")
        if isinstance(progress, bool):
            raise ValidationError("Progress must be a number")
        try:
            value = float(progress)
        except (TypeError, ValueError):
            raise ValidationError("Progress must be a number")
        if not math.isfinite(value):
            raise ValidationError("Progress must be a number")
        value = round(value, 2)
        if value < 0 or value > 100:
            raise ValidationError("Progress must be between 0 and 100")
        chapter = self.chapter_repository.get_by_id(chapter_id)
        if chapter is None:
            raise NotFoundError("Chapter not found")
        if chapter.series_id != series_id:
            raise ValidationError("Chapter does not belong to this series")
        return self.repository.upsert_progress(user_id, series_id, chapter_id, value)

    def continue_reading(self, user_id, limit=10):
        seen = set()
        items = []
        for row in self.repository.get_recent(user_id):
            if row.series_id in seen:
                continue
            seen.add(row.series_id)
            series = self.series_repository.get_by_id(row.series_id)
            chapter = self.chapter_repository.get_by_id(row.chapter_id)
            items.append(
                {
                    "seriesId": row.series_id,
                    "seriesTitle": series.title if series else "Unknown Series",
                    "seriesCover": (series.cover_image_url if series else None) or "",
                    "lastChapterId": row.chapter_id,
                    "lastChapterTitle": chapter.title if chapter else "Unknown Chapter",
                    "lastChapterNumber": chapter.chapter_number if chapter else 0,
                    "progress": float(row.progress or 0),
                    "lastReadAt": row.updated_at.isoformat(),
                }
            )
            if len(items) >= limit:
                break
        return items

    def series_progress(self, user_id, series_id):
        if self.series_repository.get_by_id(series_id) is None:
            raise NotFoundError("Series not found")
        total = self.chapter_repository.count_for_series(series_id)
        read = self.repository.count_completed(user_id, series_id)
        latest = self.repository.get_latest_for_series(user_id, series_id)
        last_chapter = self.chapter_repository.get_by_id(latest.chapter_id) if latest else None
        return {
            "readChapters": read,
            "totalChapters": total,
            "progress": round(read / total * 100) if total else 0,
            "lastReadChapter": last_chapter.title if last_chapter else None,
        }
