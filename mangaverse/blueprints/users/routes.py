from flask import jsonify

from mangaverse.auth import current_user, login_required
from mangaverse.blueprints.helpers import get_payload
from mangaverse.blueprints.users import users_bp
from mangaverse.services.user_service import UserService


user_service = UserService()


@users_bp.route("/users/<user_id>", methods=["GET"])
def profile(user_id):
    return jsonify(user_service.public_profile(user_id)), 200


@users_bp.route("/user", methods=["PATCH"])
@login_required
def update_profile():
    user = user_service.update_profile(current_user(), get_payload())
    return jsonify(user.to_dict(private=True)), 200


@users_bp.route("/user/settings", methods=["GET"])
@login_required
def settings_get():
    return jsonify(user_service.get_settings(current_user())), 200


@users_bp.route("/user/settings", methods=["PUT"])
@login_required
def settings_put():
    data = get_payload()
    settings = data.get("settings", data)
    return jsonify(user_service.update_settings(current_user(), settings)), 200


@users_bp.route("/user/profile-stats", methods=["GET"])
@login_required
def profile_stats():
    return jsonify(user_service.profile_stats(current_user())), 200
