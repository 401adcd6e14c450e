"""Background thread that periodically removes expired results."""

from __future__ import annotations

import threading

from flask import Flask

from .base import ResultStore

_SWEEPER_EXTENSION_KEY = "result_sweeper"


class ResultSweeper:
    """Manages the sweep loop lifecycle for one application."""

    def __init__(self, app: Flask, store: ResultStore, interval: float = 60.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.app = app
        self.store = store
        self.interval = float(interval)
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run_loop, name="result-sweeper", daemon=True
        )

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        # A stopped sweeper is not restarted; threads run only once.
        if self._thread.is_alive() or self._stop.is_set():
            return
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread.is_alive():
            self._thread.join(timeout)

    def run_once(self) -> int:
        """Sweep the store once inside an application context."""
        with self.app.app_context():
            removed = self.store.sweep()
        if removed:
            self.app.logger.info("Swept %s expired result(s)", removed)
        else:
            self.app.logger.debug("Sweep found no expired results")
        return removed

    def _run_loop(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.run_once()
            except Exception:  # pragma: no cover - defensive logging
                self.app.logger.exception("Result sweep failed")


_sweeper_lock = threading.Lock()


def ensure_sweeper_started(app: Flask, store: ResultStore) -> ResultSweeper:
    """Ensure a sweeper thread is running for the given Flask app."""
    with _sweeper_lock:
        sweeper = app.extensions.get(_SWEEPER_EXTENSION_KEY)
        if sweeper is None:
            sweeper = ResultSweeper(
                app, store, interval=app.config.get("RESULT_SWEEP_INTERVAL", 60)
            )
            app.extensions[_SWEEPER_EXTENSION_KEY] = sweeper
        sweeper.start()
    return sweeper
