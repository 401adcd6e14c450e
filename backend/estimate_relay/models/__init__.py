"""Database models for the estimate relay backend."""

from .result import StoredResult

__all__ = ["StoredResult"]
