"""Result entry type and the contract shared by all result store backends."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
VALID_STATUSES = (STATUS_SUCCESS, STATUS_ERROR)

DEFAULT_TTL_SECONDS = 300.0


class ResultStoreError(RuntimeError):
    """Raised when the backing store cannot be read or written."""


def is_number(value: object) -> bool:
    """Return whether ``value`` is a finite int or float (booleans excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Integers beyond float range.
        return False


def _isoformat(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ResultEntry:
    """A single estimate result posted back by the workflow engine."""

    status: str
    total_estimate: float | None = None
    squares: float | None = None
    message: str | None = None
    received_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if self.status not in VALID_STATUSES:
            raise ValueError(f"unsupported status: {self.status!r}")
        if self.status == STATUS_SUCCESS and not is_number(self.total_estimate):
            raise ValueError("a successful result requires a numeric total estimate")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status}
        if self.total_estimate is not None:
            data["totalEstimate"] = self.total_estimate
        if self.squares is not None:
            data["squares"] = self.squares
        if self.message:
            data["message"] = self.message
        data["receivedAt"] = _isoformat(self.received_at)
        return data


class ResultStore(ABC):
    """Time-bounded mapping of callback id to :class:`ResultEntry`.

    Every entry expires ``ttl`` seconds after it was last written. Reads never
    return an expired entry; an expired entry found on read is removed.
    """

    backend_name = "abstract"

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = float(ttl)

    def is_expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.ttl

    @abstractmethod
    def put(self, callback_id: str, entry: ResultEntry) -> None:
        """Insert or replace the entry and restart its expiry clock."""

    @abstractmethod
    def get(self, callback_id: str) -> ResultEntry | None:
        """Return the live entry for ``callback_id`` or ``None``."""

    @abstractmethod
    def sweep(self) -> int:
        """Remove all expired entries and return how many were removed."""
