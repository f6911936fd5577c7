import os


PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))


def normalize_database_url(url):
    # SQLAlchemy only accepts the postgresql:// spelling.
    if url and url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class BaseConfig:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = normalize_database_url(
        os.environ.get("DATABASE_URL", "sqlite:///mangaverse.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_TYPE = os.environ.get("SESSION_TYPE", "sqlalchemy") or None
    SESSION_SQLALCHEMY_TABLE = "sessions"
    SESSION_PERMANENT = True

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", os.path.join(PROJECT_ROOT, "uploads"))
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_UPLOAD_MB", "10")) * 1024 * 1024 * 50
    MAX_UPLOAD_FILE_BYTES = int(os.environ.get("MAX_UPLOAD_MB", "10")) * 1024 * 1024
    MAX_CHAPTER_PAGES = 50
    SPA_DIST_PATH = os.environ.get("SPA_DIST_PATH")

    SETUP_REQUIRED = _env_flag("SETUP_REQUIRED", True)
    SETUP_STATUS_CACHE_SECONDS = 30
    DEFAULT_SITE_NAME = "MangaVerse"
    ADMIN_STARTING_COINS = 10000

    STRIPE_SECRET_KEY = os.environ.get("STRIPE_SECRET_KEY")
    STRIPE_PUBLISHABLE_KEY = os.environ.get("STRIPE_PUBLISHABLE_KEY")
    STRIPE_CURRENCY = os.environ.get("STRIPE_CURRENCY", "usd")
    PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", "http://localhost:5000")

    PREMIUM_FOLLOWER_THRESHOLD = 500
    AD_REVENUE_FOLLOWER_THRESHOLD = 1000
    POPULAR_FOLLOWER_THRESHOLD = 1000
    VERIFIED_FOLLOWER_THRESHOLD = 10000

    COIN_PACKAGES = [
        {"id": "starter", "amount": 100, "bonus": 0, "price_cents": 99},
        {"id": "basic", "amount": 500, "bonus": 50, "price_cents": 499, "popular": True},
        {"id": "premium", "amount": 1000, "bonus": 150, "price_cents": 999},
        {"id": "deluxe", "amount": 2500, "bonus": 500, "price_cents": 1999, "best_value": True},
        {"id": "ultimate", "amount": 5000, "bonus": 1500, "price_cents": 3999},
        {"id": "legendary", "amount": 10000, "bonus": 3000, "price_cents": 6999},
    ]


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SETUP_REQUIRED = _env_flag("SETUP_REQUIRED", False)


class ProductionConfig(BaseConfig):
    DEBUG = False
    SESSION_COOKIE_SECURE = True


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SESSION_TYPE = None
    SETUP_REQUIRED = False
    LOG_LEVEL = "WARNING"
    STRIPE_SECRET_KEY = "sk_test_dummy"
    PUBLIC_BASE_URL = "http://localhost"
