"""
One-shot installer: validate the database, create the schema, create the
admin account and mark the site configuration complete.

Each step reports failure by returning a falsy value; the full run stops at
the first failing step and surfaces its message. Nothing is rolled back.
"""

from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import create_engine, func, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash

from mangaverse import db
from mangaverse.config import normalize_database_url
from mangaverse.logger import get_logger
from mangaverse.models.site_config import MAIN_CONFIG_ID, SiteConfig
from mangaverse.models.transaction import Transaction
from mangaverse.models.user import User
from mangaverse.services.setup_status import clear_setup_status_cache


logger = get_logger(__name__)

SUPPORTED_BACKENDS = ("postgresql", "sqlite")
CONNECT_TIMEOUT_SECONDS = 10


def _connect_args(url):
    if url.get_backend_name() == "postgresql":
        return {"connect_timeout": CONNECT_TIMEOUT_SECONDS}
    return {"timeout": CONNECT_TIMEOUT_SECONDS}


def _mask(url) -> str:
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return "<invalid url>"


class InstallManager:
    def __init__(self, app_engine=None, app_database_url: Optional[str] = None,
                 starting_coins: int = 10000, default_site_name: str = "MangaVerse"):
        self.app_engine = app_engine
        self.app_database_url = normalize_database_url(app_database_url) if app_database_url else None
        self.starting_coins = starting_coins
        self.default_site_name = default_site_name
        self.engine = None
        self._owns_engine = False

    def validate_database_connection(self, database_url: Optional[str]) -> bool:
        if not database_url or not database_url.strip():
            logger.error("Database URL is empty")
            return False
        database_url = normalize_database_url(database_url.strip())
        try:
            url = make_url(database_url)
        except ArgumentError:
            logger.error("Database URL could not be parsed")
            return False
        if url.get_backend_name() not in SUPPORTED_BACKENDS:
            logger.error("Unsupported database backend %r", url.get_backend_name())
            return False

        if self.app_engine is not None and database_url == self.app_database_url:
            engine, owned = self.app_engine, False
        else:
            try:
                engine, owned = create_engine(url, connect_args=_connect_args(url)), True
            except (ArgumentError, SQLAlchemyError, ImportError) as exc:
                logger.error("Could not create engine for %s: %s", _mask(database_url), exc)
                return False
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection validated for %s", _mask(database_url))
            return True
        except SQLAlchemyError as exc:
            logger.error("Database validation failed for %s: %s", _mask(database_url), exc)
            return False
        finally:
            if owned:
                engine.dispose()

    def initialize_database(self, database_url: str) -> bool:
        database_url = normalize_database_url(database_url.strip())
        if self.app_engine is not None and database_url == self.app_database_url:
            self.engine = self.app_engine
            self._owns_engine = False
            return True
        try:
            url = make_url(database_url)
            self.engine = create_engine(url, connect_args=_connect_args(url))
            self._owns_engine = True
            return True
        except (ArgumentError, SQLAlchemyError, ImportError) as exc:
            logger.error("Failed to initialize database: %s", exc)
            return False

    def _require_engine(self):
        if self.engine is None:
            raise RuntimeError("Database not initialized")
        return self.engine

    def create_tables(self) -> bool:
        engine = self._require_engine()
        try:
            db.metadata.create_all(bind=engine)
            logger.info("Database tables created")
            return True
        except SQLAlchemyError as exc:
            logger.error("Failed to create tables: %s", exc)
            return False

    def create_admin_user(self, username: str, email: Optional[str], password: str) -> Optional[str]:
        engine = self._require_engine()
        email = email or f"{username}@admin.local"
        try:
            with Session(engine) as session:
                user = session.execute(
                    select(User).where(func.lower(User.username) == username.lower())
                ).scalar_one_or_none()
                if user is None:
                    user = User(username=username, email=email, coin_balance=0)
                    session.add(user)
                user.password_hash = generate_password_hash(password)
                user.is_creator = True
                user.is_admin = True
                session.flush()
                if self.starting_coins and user.coin_balance < self.starting_coins:
                    grant = self.starting_coins - (user.coin_balance or 0)
                    session.add(
                        Transaction(
                            user_id=user.id,
                            type="reward",
                            amount=grant,
                            description="Administrator starting balance",
                        )
                    )
                    user.coin_balance = (user.coin_balance or 0) + grant
                session.commit()
                logger.info("Admin user %s ready (%s)", username, user.id)
                return user.id
        except SQLAlchemyError as exc:
            logger.error("Failed to create admin user: %s", exc)
            return None

    def complete_setup(self, site_name: Optional[str], admin_user_id: str,
                       stripe_public_key: Optional[str] = None,
                       stripe_secret_key: Optional[str] = None) -> bool:
        engine = self._require_engine()
        try:
            with Session(engine) as session:
                site = session.get(SiteConfig, MAIN_CONFIG_ID)
                if site is None:
                    site = SiteConfig(id=MAIN_CONFIG_ID)
                    session.add(site)
                site.setup_complete = True
                site.site_name = site_name or self.default_site_name
                site.admin_user_id = admin_user_id
                site.installer_disabled = False
                if stripe_public_key:
                    site.stripe_public_key = stripe_public_key
                if stripe_secret_key:
                    site.stripe_secret_key = stripe_secret_key
                site.updated_at = datetime.utcnow()
                session.commit()
            clear_setup_status_cache()
            logger.info("Setup marked complete")
            return True
        except SQLAlchemyError as exc:
            logger.error("Failed to complete setup: %s", exc)
            return False

    def check_setup_status(self) -> Dict:
        if self.engine is None:
            return {"isSetup": False}
        try:
            with Session(self.engine) as session:
                site = session.get(SiteConfig, MAIN_CONFIG_ID)
                return {
                    "isSetup": bool(site and site.setup_complete),
                    "config": site.to_dict() if site else None,
                }
        except SQLAlchemyError as exc:
            logger.error("Failed to check setup status: %s", exc)
            return {"isSetup": False}

    def perform_full_installation(self, setup: Dict) -> Dict:
        database_url = setup.get("databaseUrl")
        try:
            logger.info("Installation step 1/5: validating database")
            if not self.validate_database_connection(database_url):
                return {"success": False, "error": "Invalid database URL or connection failed"}

            logger.info("Installation step 2/5: initializing database")
            if not self.initialize_database(database_url):
                return {"success": False, "error": "Failed to initialize database connection"}

            logger.info("Installation step 3/5: creating tables")
            if not self.create_tables():
                return {"success": False, "error": "Failed to create database tables"}

            logger.info("Installation step 4/5: creating admin user")
            admin_user_id = self.create_admin_user(
                setup["adminUsername"],
                setup.get("adminEmail"),
                setup["adminPassword"],
            )
            if not admin_user_id:
                return {"success": False, "error": "Failed to create admin user"}

            logger.info("Installation step 5/5: completing setup")
            if not self.complete_setup(
                setup.get("siteName"),
                admin_user_id,
                setup.get("stripePublicKey"),
                setup.get("stripeSecretKey"),
            ):
                return {"success": False, "error": "Failed to complete setup configuration"}

            return {"success": True, "adminUserId": admin_user_id}
        except Exception as exc:
            logger.exception("Installation failed")
            return {"success": False, "error": str(exc) or "Unknown error occurred"}

    def close(self) -> None:
        if self.engine is not None and self._owns_engine:
            self.engine.dispose()
        self.engine = None
        self._owns_engine = False
