from flask import jsonify

from mangaverse.auth import current_user, login_required
from mangaverse.blueprints.groups import groups_bp
from mangaverse.blueprints.helpers import get_payload
from mangaverse.services.group_service import GroupService


group_service = GroupService()


@groups_bp.route("/groups", methods=["GET"])
def group_list():
    return jsonify([g.to_dict() for g in group_service.list_groups()]), 200


@groups_bp.route("/groups/<group_id>", methods=["GET"])
def group_detail(group_id):
    group = group_service.get_group(group_id)
    return jsonify(group.to_dict(include_members=True)), 200


@groups_bp.route("/groups", methods=["POST"])
@login_required
def group_create():
    group = group_service.create_group(current_user(), get_payload())
    return jsonify(group.to_dict(include_members=True)), 201
