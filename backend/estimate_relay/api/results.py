"""Polling endpoints for retrieving stored estimate results."""

from __future__ import annotations

from datetime import UTC, datetime
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from ..store import get_result_store

bp = Blueprint("results", __name__)

PENDING_MESSAGE = "Estimate is being calculated..."


def _now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def _lookup(callback_id: str) -> tuple[object, int]:
    entry = get_result_store().get(callback_id)
    if entry is None:
        current_app.logger.info("Result for callback %s pending", callback_id)
        body = {
            "status": "pending",
            "callbackId": callback_id,
            "message": PENDING_MESSAGE,
            "checkedAt": _now_iso(),
        }
        return jsonify(body), HTTPStatus.OK

    current_app.logger.info(
        "Result for callback %s completed (status=%s)", callback_id, entry.status
    )
    body = {
        "status": "completed",
        "callbackId": callback_id,
        "result": entry.to_dict(),
        "retrievedAt": _now_iso(),
    }
    return jsonify(body), HTTPStatus.OK


@bp.get("/result")
def get_result() -> tuple[object, int]:
    callback_id = request.args.get("callbackId", "")
    if not callback_id.strip():
        return (
            jsonify({"error": "Missing or invalid callbackId parameter"}),
            HTTPStatus.BAD_REQUEST,
        )
    return _lookup(callback_id)


@bp.get("/status/<path:callback_id>")
def get_status(callback_id: str) -> tuple[object, int]:
    return _lookup(callback_id)
