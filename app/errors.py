# app/errors.py
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from app.extensions import db, jwt
from app.models import User

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error that maps straight onto a JSON ``{"message": ...}`` response."""

    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class UnauthorizedError(ApiError):
    status_code = 401

    def __init__(self, message="Unauthorized"):
        super().__init__(message)


class NotFoundError(ApiError):
    # also used for rows owned by someone else, so existence never leaks
    status_code = 404

    def __init__(self, message="Not found"):
        super().__init__(message)


class ConflictError(ApiError):
    status_code = 409


class StorageError(ApiError):
    status_code = 500


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        db.session.rollback()
        if err.status_code >= 500:
            logger.error(f"❌ {err.__class__.__name__}: {err.message}")
        return jsonify({"message": err.message}), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({"message": err.description or err.name}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        db.session.rollback()
        logger.exception(f"❌ Unhandled error: {err}")
        return jsonify({"message": "Internal server error"}), 500


def register_jwt_handlers():
    """Every session failure is reported as a plain 401."""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({"message": "Unauthorized"}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logger.warning(f"⚠️ Invalid session token: {reason}")
        return jsonify({"message": "Unauthorized"}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({"message": "Unauthorized"}), 401

    @jwt.user_lookup_error_loader
    def unknown_user(jwt_header, jwt_payload):
        return jsonify({"message": "Unauthorized"}), 401

    @jwt.user_lookup_loader
    def load_user(jwt_header, jwt_payload):
        return db.session.get(User, jwt_payload["sub"])
