"""Result store backends and helpers for wiring them into the app."""

from __future__ import annotations

from flask import Flask, current_app

from .base import ResultEntry, ResultStore, ResultStoreError
from .memory import MemoryResultStore
from .sql import SqlResultStore

_STORE_EXTENSION_KEY = "result_store"

_BACKENDS: dict[str, type[ResultStore]] = {
    MemoryResultStore.backend_name: MemoryResultStore,
    SqlResultStore.backend_name: SqlResultStore,
}


def build_result_store(app: Flask) -> ResultStore:
    """Create the store selected by ``RESULT_STORE_BACKEND``."""
    backend = (app.config.get("RESULT_STORE_BACKEND") or "memory").strip().lower()
    store_class = _BACKENDS.get(backend)
    if store_class is None:
        raise ValueError(
            f"unknown result store backend {backend!r}; expected one of {sorted(_BACKENDS)}"
        )
    return store_class(ttl=float(app.config.get("RESULT_TTL_SECONDS", 300)))


def init_result_store(app: Flask, store: ResultStore | None = None) -> ResultStore:
    """Attach ``store`` (or a configured one) to the application."""
    if store is None:
        store = build_result_store(app)
    app.extensions[_STORE_EXTENSION_KEY] = store
    return store


def get_result_store() -> ResultStore:
    """Return the store of the active application."""
    return current_app.extensions[_STORE_EXTENSION_KEY]


__all__ = [
    "MemoryResultStore",
    "ResultEntry",
    "ResultStore",
    "ResultStoreError",
    "SqlResultStore",
    "build_result_store",
    "get_result_store",
    "init_result_store",
]
