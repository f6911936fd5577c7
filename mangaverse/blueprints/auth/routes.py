from flask import jsonify

from mangaverse.auth import current_user, login_required, login_user, logout_user
from mangaverse.blueprints.auth import auth_bp
from mangaverse.blueprints.helpers import get_payload
from mangaverse.services.auth_service import AuthService


auth_service = AuthService()


@auth_bp.route("/register", methods=["POST"])
def register():
    data = get_payload()
    user = auth_service.register(
        data.get("username"),
        data.get("email"),
        data.get("password"),
        first_name=data.get("firstName"),
        last_name=data.get("lastName"),
    )
    login_user(user)
    return jsonify(user.to_dict(private=True)), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = get_payload()
    user = auth_service.authenticate(data.get("username"), data.get("password"))
    login_user(user)
    return jsonify(user.to_dict(private=True)), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"message": "Logged out"}), 200


@auth_bp.route("/user", methods=["GET"])
@auth_bp.route("/auth/user", methods=["GET"])
@login_required
def me():
    return jsonify(current_user().to_dict(private=True)), 200
