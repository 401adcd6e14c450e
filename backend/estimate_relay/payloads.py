"""Normalization of callback payloads posted by the workflow engine."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .store.base import STATUS_SUCCESS, VALID_STATUSES, ResultEntry, is_number

# Candidate keys in priority order. The provider names the same field
# differently depending on how the workflow step was configured.
ESTIMATE_FIELDS: tuple[str, ...] = (
    "totalEstimate",
    "Total Estimate $",
    "total_estimate_",
    "total_estimate",
)
SQUARES_FIELDS: tuple[str, ...] = ("squares", "Squares")


class PayloadError(ValueError):
    """Raised when a callback payload cannot be accepted."""


def coalesce(payload: Mapping[str, Any], candidates: Sequence[str]) -> Any:
    """Return the value of the first candidate key present with a non-null value."""
    for key in candidates:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def resolve_status(value: object) -> str:
    if isinstance(value, str) and value in VALID_STATUSES:
        return value
    return STATUS_SUCCESS


def parse_callback(payload: object) -> tuple[str, ResultEntry, list[str]]:
    """Validate a callback body.

    Returns the callback id, the entry to store and a list of warnings about
    ignored fields. Raises :class:`PayloadError` when the body is rejected.
    """

    if not isinstance(payload, Mapping):
        raise PayloadError("Request body must be a JSON object")

    callback_id = payload.get("callbackId")
    if not isinstance(callback_id, str) or not callback_id.strip():
        raise PayloadError("Missing callbackId")

    status = resolve_status(payload.get("status"))
    total_estimate = coalesce(payload, ESTIMATE_FIELDS)
    if not is_number(total_estimate):
        if status == STATUS_SUCCESS:
            raise PayloadError("totalEstimate must be a number")
        total_estimate = None

    warnings: list[str] = []
    squares = coalesce(payload, SQUARES_FIELDS)
    if squares is not None and not is_number(squares):
        warnings.append(f"ignored non-numeric squares value {squares!r}")
        squares = None

    message = payload.get("message")
    if not isinstance(message, str) or not message:
        message = None

    entry = ResultEntry(
        status=status,
        total_estimate=total_estimate,
        squares=squares,
        message=message,
    )
    return callback_id, entry, warnings
