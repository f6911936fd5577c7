from flask import jsonify, request

from mangaverse.auth import current_user, login_required
from mangaverse.blueprints.follows import follows_bp
from mangaverse.blueprints.helpers import get_payload
from mangaverse.services.follow_service import FollowService


follow_service = FollowService()


@follows_bp.route("/follow", methods=["POST"])
@login_required
def follow():
    data = get_payload()
    record = follow_service.follow(current_user(), data.get("targetId"), data.get("targetType"))
    return jsonify(record.to_dict()), 201


@follows_bp.route("/follow", methods=["DELETE"])
@login_required
def unfollow():
    data = get_payload() if request.get_data() else request.args.to_dict()
    follow_service.unfollow(current_user(), data.get("targetId"), data.get("targetType"))
    return "", 204


@follows_bp.route("/user/followed-series", methods=["GET"])
@login_required
def followed_series():
    items = follow_service.followed_series(current_user())
    return jsonify([s.to_dict() for s in items]), 200


@follows_bp.route("/users/<user_id>/followers", methods=["GET"])
def followers(user_id):
    return jsonify([u.to_dict() for u in follow_service.followers(user_id)]), 200


@follows_bp.route("/users/<user_id>/following", methods=["GET"])
def following(user_id):
    return jsonify([u.to_dict() for u in follow_service.following(user_id)]), 200


@follows_bp.route("/users/<user_id>/is-following", methods=["GET"])
@login_required
def is_following(user_id):
    target_type = request.args.get("targetType", "user")
    return jsonify(
        {"isFollowing": follow_service.is_following(current_user(), user_id, target_type)}
    ), 200
