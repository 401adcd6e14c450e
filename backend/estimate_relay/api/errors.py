"""JSON error responses for every blueprint."""

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException, MethodNotAllowed

from ..store import ResultStoreError


def register_error_handlers(app: Flask) -> None:
    """Render HTTP and store errors as JSON bodies."""

    @app.errorhandler(ResultStoreError)
    def handle_store_error(exc: ResultStoreError):
        app.logger.exception("Result store failure: %s", exc)
        return jsonify({"error": "Internal server error"}), HTTPStatus.INTERNAL_SERVER_ERROR

    @app.errorhandler(MethodNotAllowed)
    def handle_method_not_allowed(exc: MethodNotAllowed):
        response = jsonify(
            {"error": "Method not allowed", "allowedMethods": sorted(exc.valid_methods or [])}
        )
        response.status_code = HTTPStatus.METHOD_NOT_ALLOWED
        if exc.valid_methods:
            response.headers["Allow"] = ", ".join(sorted(exc.valid_methods))
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        response = jsonify({"error": exc.description or exc.name})
        response.status_code = exc.code or HTTPStatus.INTERNAL_SERVER_ERROR
        return response
