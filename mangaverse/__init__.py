import os

from flask import Flask
from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()


def create_app(config_object=None):
    app = Flask(__name__)

    from mangaverse.config import config_by_name

    if config_object is None:
        config_object = config_by_name(os.environ.get("MANGAVERSE_ENV", "development"))
    app.config.from_object(config_object)

    from mangaverse.logger import configure_logging

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)

    import mangaverse.models  # noqa: F401  registers every table on db.metadata

    if app.config.get("SESSION_TYPE"):
        from flask_session import Session

        app.config.setdefault("SESSION_SQLALCHEMY", db)
        Session(app)

    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    from mangaverse.errors import register_error_handlers
    from mangaverse.services.setup_status import register_setup_gate

    register_error_handlers(app)
    register_setup_gate(app)

    from mangaverse.blueprints.auth import auth_bp
    from mangaverse.blueprints.series import series_bp
    from mangaverse.blueprints.chapters import chapters_bp
    from mangaverse.blueprints.social import social_bp
    from mangaverse.blueprints.follows import follows_bp
    from mangaverse.blueprints.bookmarks import bookmarks_bp
    from mangaverse.blueprints.progress import progress_bp
    from mangaverse.blueprints.coins import coins_bp
    from mangaverse.blueprints.creator import creator_bp
    from mangaverse.blueprints.users import users_bp
    from mangaverse.blueprints.groups import groups_bp
    from mangaverse.blueprints.setup import setup_bp
    from mangaverse.blueprints.storage import storage_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(series_bp)
    app.register_blueprint(chapters_bp)
    app.register_blueprint(social_bp)
    app.register_blueprint(follows_bp)
    app.register_blueprint(bookmarks_bp)
    app.register_blueprint(progress_bp)
    app.register_blueprint(coins_bp)
    app.register_blueprint(creator_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(groups_bp)
    app.register_blueprint(setup_bp)
    app.register_blueprint(storage_bp)

    return app
