from flask import Blueprint


follows_bp = Blueprint("follows", __name__, url_prefix="/api")

from mangaverse.blueprints.follows import routes  # noqa: E402,F401
