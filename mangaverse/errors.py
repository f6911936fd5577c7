from flask import jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from mangaverse.logger import get_logger


logger = get_logger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None, **extra):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra

    def to_dict(self):
        body = {"message": self.message}
        body.update(self.extra)
        return body


class ValidationError(ApiError):
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class PermissionDenied(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class PaymentError(ApiError):
    status_code = 400


def _wants_json():
    if request.path.startswith("/api/"):
        return True
    return "application/json" in (request.headers.get("Accept") or "")


def register_error_handlers(app):
    from mangaverse import db

    @app.errorhandler(ApiError)
    def handle_api_error(exc):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(exc):
        db.session.rollback()
        logger.warning("Constraint violation on %s %s: %s", request.method, request.path, exc.orig)
        return jsonify({"message": "Record conflicts with existing data"}), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        if not _wants_json():
            return exc
        return jsonify({"message": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        db.session.rollback()
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"message": "Internal server error"}), 500
