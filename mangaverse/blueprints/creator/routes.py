from flask import jsonify

from mangaverse.auth import current_user, login_required
from mangaverse.blueprints.creator import creator_bp
from mangaverse.blueprints.helpers import get_payload, parse_list
from mangaverse.services.creator_service import CreatorService
from mangaverse.services.series_service import SeriesService


creator_service = CreatorService()
series_service = SeriesService()


@creator_bp.route("/creator/apply", methods=["POST"])
@login_required
def apply():
    data = get_payload()
    if isinstance(data.get("contentTypes"), str):
        data["contentTypes"] = parse_list(data["contentTypes"], "contentTypes")
    user = creator_service.apply(current_user(), data)
    return jsonify(user.to_dict(private=True)), 200


@creator_bp.route("/creator/series", methods=["GET"])
@login_required
def my_series():
    items = series_service.list_for_author(current_user().id)
    return jsonify([s.to_dict() for s in items]), 200


@creator_bp.route("/creator/analytics", methods=["GET"])
@login_required
def analytics():
    return jsonify(creator_service.analytics(current_user())), 200
