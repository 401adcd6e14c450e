"""Configuration for the estimate relay backend."""

from __future__ import annotations

import os


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration for the Flask application."""

    SQLALCHEMY_DATABASE_URI: str = os.getenv("DATABASE_URL", "sqlite:///estimate_relay.db")
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    JSONIFY_PRETTYPRINT_REGULAR: bool = False
    CORS_ALLOWED_ORIGINS: str = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    API_URL_PREFIX: str = os.getenv("API_URL_PREFIX", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    RESULT_STORE_BACKEND: str = os.getenv("RESULT_STORE_BACKEND", "memory")
    RESULT_TTL_SECONDS: float = float(os.getenv("RESULT_TTL_SECONDS", "300"))
    RESULT_SWEEP_INTERVAL: float = float(os.getenv("RESULT_SWEEP_INTERVAL", "60"))
    ENABLE_RESULT_SWEEPER: bool = _env_flag("ENABLE_RESULT_SWEEPER", "true")
    CALLBACK_RATE_LIMIT: str = os.getenv("CALLBACK_RATE_LIMIT", "")

    DB_INIT_MAX_RETRIES: int = int(os.getenv("DB_INIT_MAX_RETRIES", "30"))
    DB_INIT_RETRY_DELAY: float = float(os.getenv("DB_INIT_RETRY_DELAY", "2"))
