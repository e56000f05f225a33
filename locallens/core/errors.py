"""
Error types raised by the services and their JSON rendering.

Every handled failure leaves the API as {"error": <message>} plus an
optional "details" entry, with the status carried by the exception.
"""

import logging

import pydantic
from flask import jsonify
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class LocalLensError(Exception):
    status_code = 500

    def __init__(self, message: str, details=None, status_code: int = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(LocalLensError):
    status_code = 400


class UnknownCategoryError(ValidationError):
    def __init__(self, category: str):
        super().__init__(f"Unknown category: {category}")
        self.category = category


class UnauthorizedError(LocalLensError):
    status_code = 401


class ForbiddenError(LocalLensError):
    status_code = 403


class NotFoundError(LocalLensError):
    status_code = 404


class ConflictError(LocalLensError):
    status_code = 409


class GeocodingError(LocalLensError):
    status_code = 502


def _pydantic_messages(exc: pydantic.ValidationError):
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg"))
    return messages


def register_error_handlers(app):
    @app.errorhandler(LocalLensError)
    def _handle_locallens(exc):
        if exc.status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(pydantic.ValidationError)
    def _handle_pydantic(exc):
        return jsonify({"error": "Validation error", "details": _pydantic_messages(exc)}), 400

    @app.errorhandler(PyMongoError)
    def _handle_store(exc):
        logger.exception("Store failure")
        return jsonify({"error": "Database error", "details": str(exc)}), 500

    @app.errorhandler(404)
    def _handle_missing_route(exc):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def _handle_bad_method(exc):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(Exception)
    def _handle_unexpected(exc):
        if isinstance(exc, HTTPException):
            return jsonify({"error": exc.description}), exc.code
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error", "details": str(exc)}), 500
