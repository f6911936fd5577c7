from datetime import datetime, timedelta

from sqlalchemy import or_

from mangaverse import db
from mangaverse.models.series import Series


class SeriesRepository:
    def get_by_id(self, series_id):
        return Series.query.get(series_id)

    def get_many(self, series_ids):
        if not series_ids:
            return []
        return Series.query.filter(Series.id.in_(series_ids)).order_by(Series.updated_at.desc()).all()

    def list(self, series_type=None, status=None, limit=None):
        query = Series.query
        if series_type:
            query = query.filter(Series.type == series_type)
        if status:
            query = query.filter(Series.status == status)
        query = query.order_by(Series.updated_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_for_author(self, author_id):
        return (
            Series.query.filter_by(author_id=author_id)
            .order_by(Series.updated_at.desc())
            .all()
        )

    def trending(self, limit):
        return (
            Series.query.order_by(Series.view_count.desc(), Series.bookmark_count.desc())
            .limit(limit)
            .all()
        )

    def rising(self, limit, days=30, min_views=100):
        since = datetime.utcnow() - timedelta(days=days)
        return (
            Series.query.filter(Series.created_at >= since, Series.view_count > min_views)
            .order_by(Series.view_count.desc(), Series.created_at.desc())
            .limit(limit)
            .all()
        )

    def search(self, text, series_type=None, status=None, limit=20):
        pattern = f"%{text}%"
        query = Series.query.filter(
            or_(Series.title.ilike(pattern), Series.description.ilike(pattern))
        )
        if series_type:
            query = query.filter(Series.type == series_type)
        if status:
            query = query.filter(Series.status == status)
        return query.order_by(Series.view_count.desc()).limit(limit).all()

    def add(self, series):
        db.session.add(series)
        db.session.flush()
        return series

    def delete(self, series):
        db.session.delete(series)
