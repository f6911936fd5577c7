from flask import Blueprint


setup_bp = Blueprint("setup", __name__, url_prefix="/api")

from mangaverse.blueprints.setup import routes  # noqa: E402,F401
