from flask import jsonify, request

from mangaverse.auth import current_user, login_required
from mangaverse.blueprints.helpers import get_payload, parse_bool, parse_limit, parse_list
from mangaverse.blueprints.series import series_bp
from mangaverse.services.chapter_service import ChapterService
from mangaverse.services.series_service import SeriesService
from mangaverse.repositories.user_repository import UserRepository


series_service = SeriesService()
chapter_service = ChapterService()
user_repository = UserRepository()


def _series_fields(data, partial=False):
    genres = parse_list(data.get("genres"), "genres") if "genres" in data or not partial else None
    tags = parse_list(data.get("tags"), "tags") if "tags" in data or not partial else None
    if "isNSFW" in data:
        data["isNSFW"] = parse_bool(data["isNSFW"])
    return data, genres, tags


@series_bp.route("/series", methods=["GET"])
def series_list():
    items = series_service.list_series(
        series_type=request.args.get("type"),
        status=request.args.get("status"),
        genre=request.args.get("genre"),
        limit=parse_limit(None, maximum=200),
    )
    return jsonify([s.to_dict() for s in items]), 200


@series_bp.route("/series/trending", methods=["GET"])
def series_trending():
    items = series_service.trending(limit=parse_limit(10))
    return jsonify([s.to_dict() for s in items]), 200


@series_bp.route("/series/rising", methods=["GET"])
def series_rising():
    items = series_service.rising(limit=parse_limit(12))
    return jsonify([s.to_dict() for s in items]), 200


@series_bp.route("/series/search", methods=["GET"])
def series_search():
    items = series_service.search(
        request.args.get("q"),
        series_type=request.args.get("type"),
        status=request.args.get("status"),
        genre=request.args.get("genre"),
    )
    return jsonify([s.to_dict() for s in items]), 200


@series_bp.route("/search", methods=["GET"])
def search_all():
    result = series_service.search_all(request.args.get("q") or "")
    return jsonify(
        {
            "series": [s.to_dict() for s in result["series"]],
            "creators": [u.to_dict() for u in result["creators"]],
        }
    ), 200


@series_bp.route("/series/<series_id>", methods=["GET"])
def series_detail(series_id):
    series = series_service.get_series(series_id)
    return jsonify(series.to_dict()), 200


@series_bp.route("/series", methods=["POST"])
@login_required
def series_create():
    data, genres, tags = _series_fields(get_payload())
    series = series_service.create_series(
        current_user(),
        data,
        genres=genres,
        tags=tags,
        cover_file=request.files.get("coverImage"),
    )
    return jsonify(series.to_dict()), 201


@series_bp.route("/series/<series_id>", methods=["PATCH", "PUT"])
@login_required
def series_update(series_id):
    data, genres, tags = _series_fields(get_payload(), partial=True)
    series = series_service.update_series(
        current_user(),
        series_id,
        data,
        genres=genres,
        tags=tags,
        cover_file=request.files.get("coverImage"),
    )
    return jsonify(series.to_dict()), 200


@series_bp.route("/series/<series_id>", methods=["DELETE"])
@login_required
def series_delete(series_id):
    series_service.delete_series(current_user(), series_id, chapter_service)
    return "", 204


@series_bp.route("/creators/trending", methods=["GET"])
def creators_trending():
    creators = user_repository.trending_creators(parse_limit(12))
    return jsonify([u.to_dict() for u in creators]), 200
