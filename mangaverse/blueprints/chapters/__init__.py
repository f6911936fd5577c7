from flask import Blueprint


chapters_bp = Blueprint("chapters", __name__, url_prefix="/api")

from mangaverse.blueprints.chapters import routes  # noqa: E402,F401
