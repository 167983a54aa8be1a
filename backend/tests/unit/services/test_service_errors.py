# tests/unit/services/test_service_errors.py
from __future__ import annotations

import pytest
from blogapi.services._shared.errors import violates
from sqlalchemy.exc import IntegrityError


def _integrity_error(driver_message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, Exception(driver_message))


@pytest.mark.parametrize(
    "driver_message",
    [
        'duplicate key value violates unique constraint "uq_users_email"',
        "UNIQUE constraint failed: users.email",
    ],
)
def test_violates_recognizes_postgres_and_sqlite_messages(driver_message):
    assert violates(_integrity_error(driver_message), "uq_users_email")


@pytest.mark.parametrize(
    "driver_message",
    [
        'duplicate key value violates unique constraint "uq_users_refresh_token"',
        "UNIQUE constraint failed: users.refresh_token",
    ],
)
def test_violates_ignores_other_constraints(driver_message):
    assert not violates(_integrity_error(driver_message), "uq_users_email")


def test_violates_requires_unique_prefix_for_column_fallback():
    assert not violates(_integrity_error("FOREIGN KEY failed: posts.user"), "fk_posts_user")
