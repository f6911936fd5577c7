from flask import Blueprint


progress_bp = Blueprint("progress", __name__, url_prefix="/api")

from mangaverse.blueprints.progress import routes  # noqa: E402,F401
