"""Application factory for the estimate relay backend."""
from __future__ import annotations

import time

from flask import Flask
from sqlalchemy.exc import OperationalError

from .config import Config
from .extensions import cors, db, limiter
from .store import ResultStore, init_result_store


def create_app(
    config_class: type[Config] = Config, result_store: ResultStore | None = None
) -> Flask:
    """Create and configure the Flask application instance."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(str(app.config.get("LOG_LEVEL") or "INFO").upper())

    db.init_app(app)

    allowed_origins = [
        origin.strip()
        for origin in (app.config.get("CORS_ALLOWED_ORIGINS") or "").split(",")
        if origin.strip()
    ]
    cors.init_app(
        app,
        resources={r"/*": {"origins": allowed_origins}},
        allow_headers=["Content-Type"],
        send_wildcard="*" in allowed_origins,
    )

    app.config.setdefault("RATELIMIT_ENABLED", bool(app.config.get("CALLBACK_RATE_LIMIT")))
    limiter.init_app(app)

    from .api.callback import bp as callback_bp
    from .api.errors import register_error_handlers
    from .api.health import bp as health_bp
    from .api.results import bp as results_bp

    url_prefix = (app.config.get("API_URL_PREFIX") or "").rstrip("/") or None
    app.register_blueprint(health_bp, url_prefix=url_prefix)
    app.register_blueprint(callback_bp, url_prefix=url_prefix)
    app.register_blueprint(results_bp, url_prefix=url_prefix)
    register_error_handlers(app)

    store = init_result_store(app, result_store)
    if store.backend_name == "sql":
        with app.app_context():
            _initialize_database(app)

    if app.config.get("ENABLE_RESULT_SWEEPER", True):
        from .store.sweeper import ensure_sweeper_started

        ensure_sweeper_started(app, store)

    return app


def _initialize_database(app: Flask) -> None:
    """Initialize the database with retry logic to handle delayed availability."""

    max_retries = int(app.config.get("DB_INIT_MAX_RETRIES", 30))
    retry_delay = float(app.config.get("DB_INIT_RETRY_DELAY", 2))

    for attempt in range(1, max_retries + 1):
        try:
            db.create_all()
            return
        except OperationalError as exc:
            if attempt >= max_retries:
                app.logger.exception("Database initialization failed after %s attempts.", attempt)
                raise

            app.logger.warning(
                "Database initialization attempt %s/%s failed: %s", attempt, max_retries, exc
            )
            time.sleep(retry_delay)


__all__ = ["Config", "create_app"]
