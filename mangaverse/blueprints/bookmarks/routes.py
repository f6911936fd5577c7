from flask import jsonify

from mangaverse.auth import current_user, login_required
from mangaverse.blueprints.bookmarks import bookmarks_bp
from mangaverse.blueprints.helpers import get_payload
from mangaverse.services.bookmark_service import BookmarkService


bookmark_service = BookmarkService()


@bookmarks_bp.route("/bookmarks", methods=["POST"])
@login_required
def bookmark_add():
    data = get_payload()
    bookmark = bookmark_service.add_bookmark(
        current_user(), data.get("seriesId"), folder_id=data.get("folderId")
    )
    return jsonify(bookmark.to_dict()), 201


@bookmarks_bp.route("/bookmarks/<series_id>", methods=["DELETE"])
@login_required
def bookmark_remove(series_id):
    bookmark_service.remove_bookmark(current_user(), series_id)
    return "", 204


@bookmarks_bp.route("/user/bookmarks", methods=["GET"])
@login_required
def bookmark_list():
    items = bookmark_service.bookmarked_series(current_user())
    return jsonify([s.to_dict() for s in items]), 200


@bookmarks_bp.route("/user/bookmark-folders", methods=["GET"])
@login_required
def folder_list():
    folders = bookmark_service.list_folders(current_user())
    return jsonify([f.to_dict() for f in folders]), 200


@bookmarks_bp.route("/user/bookmark-folders", methods=["POST"])
@login_required
def folder_create():
    folder = bookmark_service.create_folder(current_user(), get_payload().get("name"))
    return jsonify(folder.to_dict()), 201
