from flask import Blueprint


bookmarks_bp = Blueprint("bookmarks", __name__, url_prefix="/api")

from mangaverse.blueprints.bookmarks import routes  # noqa: E402,F401
