"""Database backed result store for deployments running several instances."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models.result import StoredResult
from .base import DEFAULT_TTL_SECONDS, ResultEntry, ResultStore, ResultStoreError


def _to_entry(row: StoredResult) -> ResultEntry:
    received_at = row.received_at
    if received_at.tzinfo is None:
        # SQLite drops the offset; values are always written in UTC.
        received_at = received_at.replace(tzinfo=UTC)
    return ResultEntry(
        status=row.status,
        total_estimate=row.total_estimate,
        squares=row.squares,
        message=row.message,
        received_at=received_at,
    )


class SqlResultStore(ResultStore):
    """Store results in the ``stored_results`` table.

    Must be used inside a Flask application context.
    """

    backend_name = "sql"

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(ttl)
        self._clock = clock

    def put(self, callback_id: str, entry: ResultEntry) -> None:
        row = StoredResult(
            callback_id=callback_id,
            status=entry.status,
            total_estimate=entry.total_estimate,
            squares=entry.squares,
            message=entry.message,
            received_at=entry.received_at.astimezone(UTC),
            stored_at=self._clock(),
        )
        try:
            db.session.merge(row)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise ResultStoreError(f"failed to store result {callback_id!r}") from exc

    def get(self, callback_id: str) -> ResultEntry | None:
        try:
            row = db.session.get(StoredResult, callback_id)
            if row is None:
                return None
            now = self._clock()
            if self.is_expired(row.stored_at, now):
                removed = self._delete_expired(now, callback_id)
                db.session.commit()
                if removed:
                    return None
                # Another instance rewrote the row after it was read.
                row = db.session.get(StoredResult, callback_id, populate_existing=True)
                if row is None:
                    return None
            return _to_entry(row)
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise ResultStoreError(f"failed to read result {callback_id!r}") from exc

    def sweep(self) -> int:
        try:
            removed = self._delete_expired(self._clock())
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise ResultStoreError("failed to sweep expired results") from exc
        return removed

    def _delete_expired(self, now: float, callback_id: str | None = None) -> int:
        """Delete rows older than the TTL, re-checking expiry inside the statement."""
        query = db.session.query(StoredResult).filter(StoredResult.stored_at < now - self.ttl)
        if callback_id is not None:
            query = query.filter(StoredResult.callback_id == callback_id)
        return query.delete(synchronize_session=False)
