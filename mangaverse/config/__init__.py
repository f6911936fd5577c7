from mangaverse.config.base import (
    BaseConfig,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    normalize_database_url,
)


_CONFIGS = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def config_by_name(name):
    return _CONFIGS.get((name or "").lower(), DevelopmentConfig)
