"""Compatibility package that exposes the backend Flask application factory."""

from backend.estimate_relay import Config, create_app

__all__ = ["Config", "create_app"]
