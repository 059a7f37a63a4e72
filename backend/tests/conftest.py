"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a transaction against an in-memory SQLite database. The
session joins it through SAVEPOINTs, so service-level commits and rollbacks
behave as in production while nothing leaks between cases.
"""

from __future__ import annotations

import os
from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from threadboard.core.extensions import db as _db
from threadboard.factory import create_app


class TestConfig:
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Signs access and refresh tokens with distinct, fixed secrets.
    - Avoids hitting external services.
    """

    TESTING = True
    DEBUG = False
    API_BASE_PREFIX = "/api"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = "testing-secret-key"
    JWT_SECRET_KEY = "testing-access-secret-0123456789abcdef"
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
    REFRESH_TOKEN_SECRET = "testing-refresh-secret-0123456789abcdef"
    REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    LOG_LEVEL = "WARNING"
    LOG_REQUESTS = False
    CORS_ORIGINS = "*"
    USE_PROXYFIX = False
    POST_PAGE_SIZE = 10
    MAX_POST_FILES = 10


def _enable_sqlite_savepoints(engine) -> None:
    """Let SQLAlchemy own transaction boundaries on pysqlite.

    pysqlite issues its own ``BEGIN`` lazily and breaks SAVEPOINT nesting; the
    driver is switched to autocommit and ``BEGIN`` is emitted explicitly.
    """
    if engine.url.get_backend_name() != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):  # pragma: no cover
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _do_begin(conn):  # pragma: no cover
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _enable_sqlite_savepoints(_db.engine)
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session joined to a per-test outer transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; the outer transaction
        is rolled back after each test.

    Notes
    -----
    ``join_transaction_mode="create_savepoint"`` makes every session-level
    transaction a SAVEPOINT: ``commit()`` releases it and ``rollback()`` only
    undoes that transaction's work, never the outer one.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, join_transaction_mode="create_savepoint")
    scoped = scoped_session(SessionFactory)

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture()
def auth_headers(app):
    """Build ``Authorization`` headers carrying a signed access token for ``user``."""

    def _make(user) -> dict[str, str]:
        token = create_access_token(identity=str(user.id), additional_claims={"email": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
