from __future__ import annotations

import pathlib
import sys

import pytest
from sqlalchemy.pool import StaticPool

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _load_dependencies():
    from estimate_relay import Config, create_app
    from backend.estimate_relay.extensions import db

    return Config, create_app, db


ConfigBase, create_app, db = _load_dependencies()


class TestConfig(ConfigBase):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite+pysqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": StaticPool,
        "connect_args": {"check_same_thread": False},
    }
    RESULT_STORE_BACKEND = "memory"
    RESULT_TTL_SECONDS = 300
    ENABLE_RESULT_SWEEPER = False
    CORS_ALLOWED_ORIGINS = "*"
    CALLBACK_RATE_LIMIT = ""
    API_URL_PREFIX = ""


class SqlTestConfig(TestConfig):
    RESULT_STORE_BACKEND = "sql"


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock):
    from backend.estimate_relay.store import MemoryResultStore

    return MemoryResultStore(ttl=300, clock=clock)


@pytest.fixture()
def app(store):
    app = create_app(TestConfig, result_store=store)
    ctx = app.app_context()
    ctx.push()
    yield app
    ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def sql_app():
    app = create_app(SqlTestConfig)
    ctx = app.app_context()
    ctx.push()
    yield app
    db.session.remove()
    db.drop_all()
    ctx.pop()
