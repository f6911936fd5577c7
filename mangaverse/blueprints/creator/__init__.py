from flask import Blueprint


creator_bp = Blueprint("creator", __name__, url_prefix="/api")

from mangaverse.blueprints.creator import routes  # noqa: E402,F401
