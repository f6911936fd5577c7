from flask import Blueprint


storage_bp = Blueprint("storage", __name__)

from mangaverse.blueprints.storage import routes  # noqa: E402,F401
