import time
from typing import Dict, Optional

from flask import current_app, jsonify, redirect, request
from sqlalchemy.exc import SQLAlchemyError

from mangaverse import db
from mangaverse.logger import get_logger
from mangaverse.models.site_config import MAIN_CONFIG_ID, SiteConfig


logger = get_logger(__name__)

_LAST_CHECK_TS: Optional[float] = None
_LAST_RESULT: Optional[Dict] = None

EXEMPT_PREFIXES = ("/setup", "/api/setup", "/uploads/", "/assets/", "/static/")
EXEMPT_SUFFIXES = (
    ".js", ".css", ".ico", ".map", ".woff", ".woff2", ".mjs", ".json",
    ".png", ".jpg", ".jpeg", ".webp", ".svg",
)


def clear_setup_status_cache() -> None:
    global _LAST_CHECK_TS, _LAST_RESULT
    _LAST_CHECK_TS = None
    _LAST_RESULT = None


def check_setup_status(force: bool = False) -> Dict:
    global _LAST_CHECK_TS, _LAST_RESULT

    now = time.time()
    ttl = current_app.config.get("SETUP_STATUS_CACHE_SECONDS", 30)
    if not force and _LAST_CHECK_TS is not None and _LAST_RESULT is not None and (now - _LAST_CHECK_TS) < ttl:
        return _LAST_RESULT

    try:
        site = SiteConfig.query.get(MAIN_CONFIG_ID)
        result = {
            "isSetup": bool(site and site.setup_complete),
            "config": site.to_dict() if site else None,
        }
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.warning("Setup status check failed: %s", exc)
        result = {"isSetup": False, "config": None}

    _LAST_CHECK_TS = now
    _LAST_RESULT = result
    return result


def _is_exempt(path: str) -> bool:
    return path.startswith(EXEMPT_PREFIXES) or path.endswith(EXEMPT_SUFFIXES)


def register_setup_gate(app) -> None:
    @app.before_request
    def require_completed_setup():
        if not current_app.config.get("SETUP_REQUIRED"):
            return None
        if _is_exempt(request.path):
            return None
        status = check_setup_status()
        if status["isSetup"]:
            return None
        accepts_json = "application/json" in (request.headers.get("Accept") or "")
        if request.path.startswith("/api/") or accepts_json:
            return jsonify(
                {
                    "error": "Setup required",
                    "message": "Please complete the installation setup",
                    "setupRequired": True,
                }
            ), 503
        return redirect("/setup")
