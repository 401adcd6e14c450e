"""Stored result model definition."""

from __future__ import annotations

from ..extensions import db


class StoredResult(db.Model):
    """Estimate result row shared by every instance of the relay."""

    __tablename__ = "stored_results"

    callback_id = db.Column(db.String(255), primary_key=True)
    status = db.Column(
        db.Enum("success", "error", name="stored_result_status"), nullable=False
    )
    # JSON keeps integral estimates as ints.
    total_estimate = db.Column(db.JSON(none_as_null=True), nullable=True)
    squares = db.Column(db.JSON(none_as_null=True), nullable=True)
    message = db.Column(db.Text, nullable=True)
    received_at = db.Column(db.DateTime(timezone=True), nullable=False)
    # Epoch seconds of the last write; expiry is measured from here.
    stored_at = db.Column(db.Float, nullable=False, index=True)

    def __repr__(self) -> str:  # pragma: no cover - repr not critical for tests
        return f"<StoredResult {self.callback_id!r} {self.status}>"
