"""Pytest fixtures: one application with a fresh in-memory database per test.

The app context stays pushed for the whole test, so the test client, the
services and the factories all share the same ``db.session``.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest
from flask import Flask
from flask.testing import FlaskClient

from blogapi.core.config import TestingConfig
from blogapi.core.extensions import db as _db
from blogapi.factory import create_app
from blogapi.infra.security import WerkzeugPasswordHasher

API = "/api/v1"
DEFAULT_PASSWORD = "abc12345"


@pytest.fixture()
def app() -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with :class:`TestingConfig` applied, its context pushed
        and all tables created.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("TEST_DATABASE_URL", None)
    application = create_app(TestingConfig, instance_relative_config=False)
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def session(app: Flask):
    """Return the Flask-scoped session used by the application code."""
    return _db.session


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method=TestingConfig.PASSWORD_HASH_METHOD, max_concurrent=2)


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[..., Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2026-01-01"):
    ...         ...
    """
    from freezegun import freeze_time as _freeze_time

    return _freeze_time


# -- Hook up Factory Boy to the Flask-scoped session ---------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Bind factories to ``db.session`` whenever the test uses the database."""
    from tests.factories import bind_session

    if "app" in request.fixturenames:
        request.getfixturevalue("app")
        bind_session(_db.session)
    yield
    bind_session(None)


# -- HTTP helpers ---------------------------------------------------------------
@pytest.fixture()
def register(client: FlaskClient) -> Callable[..., Any]:
    """POST ``/register`` and return the response."""

    def _register(name: str = "Jane", email: str = "jane@x.com", password: str = DEFAULT_PASSWORD):
        return client.post(f"{API}/register", json={"name": name, "email": email, "password": password})

    return _register


@pytest.fixture()
def login(client: FlaskClient) -> Callable[..., Any]:
    """POST ``/login`` and return the response."""

    def _login(email: str = "jane@x.com", password: str = DEFAULT_PASSWORD):
        return client.post(f"{API}/login", json={"email": email, "password": password})

    return _login


@pytest.fixture()
def auth_header(register, login) -> dict[str, str]:
    """Register Jane, log her in and return a bearer header."""
    register()
    token = login().get_json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}
