"""Pytest fixtures for the token service.

Each test that needs the database gets a freshly created schema in an
in-memory SQLite database; tables are dropped again afterwards so records never
leak between cases.
"""

from __future__ import annotations

import os

import fakeredis
import pytest

from tokenauth.core.config import TestingConfig
from tokenauth.core.extensions import db as _db  # Flask-SQLAlchemy instance
from tokenauth.factory import create_app  # application factory under test
from tokenauth.services.tokens import RefreshTokenHasher


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("REDIS_URL", None)
    app = create_app(TestingConfig, instance_relative_config=False)
    return app


@pytest.fixture()
def db(app):
    """Create the schema for one test inside an application context.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(db):
    """Return the Flask-scoped session and hand it to Factory Boy."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(db.session)
    yield db.session
    SQLAlchemySession.set(None)


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the per-test schema."""
    return app.test_client()


@pytest.fixture()
def cli_runner(app, session):
    """Runner for ``flask`` CLI commands against the per-test schema."""
    return app.test_cli_runner()


@pytest.fixture()
def token_service(app):
    """The token service wired by the application factory."""
    return app.extensions["token_service"]


@pytest.fixture()
def hasher() -> RefreshTokenHasher:
    """bcrypt hasher at the library's minimum cost."""
    return RefreshTokenHasher(rounds=4)


@pytest.fixture()
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r
