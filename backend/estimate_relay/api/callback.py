"""Callback endpoint receiving estimate results from the workflow engine."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, render_template_string, request

from ..extensions import limiter
from ..payloads import PayloadError, parse_callback
from ..store import ResultEntry, get_result_store

bp = Blueprint("callback", __name__)

_NOTIFICATION_TEMPLATE = """<!DOCTYPE html>
<html>
  <head><meta charset="utf-8"><title>Estimate received</title></head>
  <body>
    {% if entry.total_estimate is not none %}
    <p>Estimate received: ${{ "{:,.2f}".format(entry.total_estimate) }}</p>
    {% else %}
    <p>Estimate failed{% if entry.message %}: {{ entry.message }}{% endif %}</p>
    {% endif %}
    <script>
      (function () {
        var payload = {type: "estimate-callback", callbackId: {{ callback_id|tojson }}, result: {{ result|tojson }}};
        if (window.parent && window.parent !== window) {
          window.parent.postMessage(payload, "*");
        }
        console.log("Callback processed:", payload);
      })();
    </script>
  </body>
</html>
"""


def _callback_rate_limit() -> str:
    # Only evaluated while rate limiting is enabled, i.e. a limit is configured.
    return current_app.config["CALLBACK_RATE_LIMIT"]


def _wants_html() -> bool:
    best = request.accept_mimetypes.best_match(["application/json", "text/html"])
    return best == "text/html"


def _render_notification(callback_id: str, entry: ResultEntry):
    page = render_template_string(
        _NOTIFICATION_TEMPLATE,
        callback_id=callback_id,
        entry=entry,
        result=entry.to_dict(),
    )
    return page, HTTPStatus.OK, {"Content-Type": "text/html; charset=utf-8"}


@bp.post("/callback")
@limiter.limit(_callback_rate_limit)
def receive_callback():
    payload = request.get_json(force=True, silent=True)
    current_app.logger.info(
        "Callback received (keys=%s)",
        sorted(payload) if isinstance(payload, dict) else type(payload).__name__,
    )

    try:
        callback_id, entry, warnings = parse_callback(payload)
    except PayloadError as exc:
        current_app.logger.warning("Rejected callback: %s", exc)
        return jsonify({"error": str(exc)}), HTTPStatus.BAD_REQUEST

    for warning in warnings:
        current_app.logger.warning("Callback %s: %s", callback_id, warning)

    get_result_store().put(callback_id, entry)
    current_app.logger.info(
        "Stored result for callback %s (status=%s, totalEstimate=%s)",
        callback_id,
        entry.status,
        entry.total_estimate,
    )

    if _wants_html():
        return _render_notification(callback_id, entry)
    return jsonify({"success": True, "callbackId": callback_id, "stored": True}), HTTPStatus.OK
