from flask import jsonify, request

from mangaverse.auth import current_user, login_required
from mangaverse.blueprints.chapters import chapters_bp
from mangaverse.blueprints.helpers import get_payload
from mangaverse.services.chapter_service import ChapterService
from mangaverse.services.coin_service import CoinService


chapter_service = ChapterService()
coin_service = CoinService()


@chapters_bp.route("/series/<series_id>/chapters", methods=["GET"])
def chapter_list(series_id):
    chapters = chapter_service.list_chapters_for_series(series_id, viewer=current_user())
    return jsonify([c.to_dict(include_content=False) for c in chapters]), 200


@chapters_bp.route("/chapters/<chapter_id>", methods=["GET"])
def chapter_read(chapter_id):
    data = chapter_service.get_chapter_for_reader(chapter_id, viewer=current_user())
    return jsonify(data), 200


@chapters_bp.route("/series/<series_id>/chapters", methods=["POST"])
@login_required
def chapter_create(series_id):
    chapter = chapter_service.create_chapter(
        current_user(),
        series_id,
        get_payload(),
        page_files=request.files.getlist("pages"),
    )
    return jsonify(chapter.to_dict()), 201


@chapters_bp.route("/chapters/<chapter_id>", methods=["PATCH", "PUT"])
@login_required
def chapter_update(chapter_id):
    chapter = chapter_service.update_chapter(current_user(), chapter_id, get_payload())
    return jsonify(chapter.to_dict()), 200


@chapters_bp.route("/chapters/<chapter_id>", methods=["DELETE"])
@login_required
def chapter_delete(chapter_id):
    chapter_service.delete_chapter(current_user(), chapter_id)
    return "", 204


@chapters_bp.route("/series/<series_id>/reorder-chapters", methods=["POST"])
@login_required
def chapter_reorder(series_id):
    data = get_payload()
    chapters = chapter_service.reorder_chapters(current_user(), series_id, data.get("chapterIds"))
    return jsonify([c.to_dict(include_content=False) for c in chapters]), 200


@chapters_bp.route("/chapters/<chapter_id>/like", methods=["POST"])
@login_required
def chapter_like(chapter_id):
    return jsonify(chapter_service.toggle_like(current_user(), chapter_id)), 200


@chapters_bp.route("/chapters/<chapter_id>/like-status", methods=["GET"])
@login_required
def chapter_like_status(chapter_id):
    return jsonify(chapter_service.like_status(current_user(), chapter_id)), 200


@chapters_bp.route("/chapters/<chapter_id>/unlock", methods=["POST"])
@login_required
def chapter_unlock(chapter_id):
    return jsonify(coin_service.unlock_chapter(current_user(), chapter_id)), 200
