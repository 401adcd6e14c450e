"""Health check endpoint."""

from flask import Blueprint, jsonify

from ..store import get_result_store

bp = Blueprint("health", __name__)


@bp.get("/health")
def health() -> tuple[object, int]:
    """Return the service health status."""
    return jsonify({"status": "ok", "store": get_result_store().backend_name}), 200
