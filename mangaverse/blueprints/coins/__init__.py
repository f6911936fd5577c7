from flask import Blueprint


coins_bp = Blueprint("coins", __name__, url_prefix="/api")

from mangaverse.blueprints.coins import routes  # noqa: E402,F401
