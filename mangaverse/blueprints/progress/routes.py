from flask import jsonify

from mangaverse.auth import current_user, login_required
from mangaverse.blueprints.helpers import get_payload
from mangaverse.blueprints.progress import progress_bp
from mangaverse.services.reading_progress_service import ReadingProgressService


progress_service = ReadingProgressService()


@progress_bp.route("/reading-progress", methods=["PUT", "POST"])
@login_required
def progress_save():
    data = get_payload()
    row = progress_service.save_progress(
        current_user().id,
        data.get("seriesId"),
        data.get("chapterId"),
        data.get("progress"),
    )
    return jsonify(row.to_dict()), 200


@progress_bp.route("/reading-progress/<series_id>", methods=["GET"])
@login_required
def progress_get(series_id):
    row = progress_service.get_progress(current_user().id, series_id)
    return jsonify(row.to_dict() if row else None), 200


@progress_bp.route("/user/continue-reading", methods=["GET"])
@login_required
def continue_reading():
    return jsonify(progress_service.continue_reading(current_user().id)), 200


@progress_bp.route("/series/<series_id>/progress", methods=["GET"])
@login_required
def series_progress(series_id):
    return jsonify(progress_service.series_progress(current_user().id, series_id)), 200
