from flask import current_app, jsonify

from mangaverse import db
from mangaverse.blueprints.helpers import get_payload
from mangaverse.blueprints.setup import setup_bp
from mangaverse.errors import ValidationError
from mangaverse.logger import get_logger
from mangaverse.services.install_manager import InstallManager
from mangaverse.services.setup_status import check_setup_status


logger = get_logger(__name__)


def _install_manager():
    return InstallManager(
        app_engine=db.engine,
        app_database_url=current_app.config["SQLALCHEMY_DATABASE_URI"],
        starting_coins=current_app.config["ADMIN_STARTING_COINS"],
        default_site_name=current_app.config["DEFAULT_SITE_NAME"],
    )


@setup_bp.route("/setup/status", methods=["GET"])
def status():
    return jsonify(check_setup_status(force=True)), 200


@setup_bp.route("/setup/validate-db", methods=["POST"])
def validate_db():
    data = get_payload()
    if check_setup_status(force=True)["isSetup"]:
        raise ValidationError("Setup has already been completed")
    database_url = data.get("databaseUrl")
    if not isinstance(database_url, str) or not database_url.strip():
        raise ValidationError("Database URL is required")
    manager = _install_manager()
    if manager.validate_database_connection(database_url):
        return jsonify({"valid": True, "message": "Database connection successful"}), 200
    return jsonify({"valid": False, "error": "Database validation failed"}), 200


@setup_bp.route("/setup/install", methods=["POST"])
def install():
    data = get_payload()
    if check_setup_status(force=True)["isSetup"]:
        raise ValidationError("Setup has already been completed")
    if not data.get("adminUsername") or not data.get("adminPassword"):
        raise ValidationError("Admin username and password are required")
    data.setdefault("databaseUrl", current_app.config["SQLALCHEMY_DATABASE_URI"])

    # The installer opens its own sessions on the same engine.
    db.session.close()
    manager = _install_manager()
    try:
        result = manager.perform_full_installation(data)
    finally:
        manager.close()

    if not result["success"]:
        logger.error("Installation failed: %s", result.get("error"))
        return jsonify(result), 500
    check_setup_status(force=True)
    logger.info("Installation completed, admin user %s", result["adminUserId"])
    return jsonify(
        {
            "success": True,
            "message": "Installation completed successfully",
            "adminUserId": result["adminUserId"],
        }
    ), 200


@setup_bp.route("/setup/install", methods=["GET", "PUT", "PATCH", "DELETE"])
def install_method_not_allowed():
    return jsonify({"message": "Method not allowed"}), 405
