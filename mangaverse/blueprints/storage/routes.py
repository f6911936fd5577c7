import os

from flask import abort, current_app, send_from_directory

from mangaverse.blueprints.storage import storage_bp


@storage_bp.route("/uploads/<path:relpath>")
def serve_upload(relpath: str):
    base_path = current_app.config.get("UPLOAD_FOLDER")
    if not base_path or not os.path.exists(base_path):
        abort(404)
    return send_from_directory(base_path, relpath)


@storage_bp.route("/", defaults={"path": ""})
@storage_bp.route("/<path:path>")
def serve_spa(path: str):
    dist_path = current_app.config.get("SPA_DIST_PATH")
    if not dist_path or path.startswith("api/") or not os.path.isdir(dist_path):
        abort(404)
    if path and os.path.isfile(os.path.join(dist_path, path)):
        return send_from_directory(dist_path, path)
    return send_from_directory(dist_path, "index.html")
