from flask import Blueprint


series_bp = Blueprint("series", __name__, url_prefix="/api")

from mangaverse.blueprints.series import routes  # noqa: E402,F401
