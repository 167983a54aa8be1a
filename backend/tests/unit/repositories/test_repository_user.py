# tests/unit/repositories/test_repository_user.py
from __future__ import annotations

import pytest
from blogapi.models.user import User
from blogapi.repositories.base import Pagination
from blogapi.repositories.user import UserRepository
from sqlalchemy.exc import IntegrityError
from tests.factories.user import UserFactory


@pytest.fixture()
def repo(session) -> UserRepository:
    return UserRepository(session=session)


def test_get_by_email_is_case_insensitive(repo, session):
    user = UserFactory(email="jane@x.com")
    session.flush()

    assert repo.get_by_email("  JANE@x.com ") is user
    assert repo.exists_by_email("jane@X.com") is True
    assert repo.get_by_email("nobody@x.com") is None
    assert repo.exists_by_email("nobody@x.com") is False


def test_email_is_unique(session):
    UserFactory(email="dup@x.com")
    session.flush()

    with pytest.raises(IntegrityError):
        UserFactory(email="DUP@x.com")
    session.rollback()


def test_refresh_token_lookup_is_exact(repo, session):
    user = UserFactory()
    session.flush()
    repo.set_refresh_token(user, "rt-1")

    assert repo.get_by_refresh_token("rt-1") is user
    assert repo.get_by_refresh_token("rt-1 ") is None
    assert repo.get_by_refresh_token("") is None


def test_set_refresh_token_overwrites(repo, session):
    user = UserFactory(refresh_token="old")
    session.flush()

    repo.set_refresh_token(user, "new")
    assert repo.get_by_refresh_token("old") is None
    assert repo.get_by_refresh_token("new") is user


def test_swap_refresh_token_is_conditional(repo, session):
    user = UserFactory(refresh_token="rt-1")
    session.flush()

    assert repo.swap_refresh_token(user.id, expected="rt-1", new="rt-2") is True
    assert user.refresh_token == "rt-2"

    # The old value no longer matches, so a second swap loses.
    assert repo.swap_refresh_token(user.id, expected="rt-1", new="rt-3") is False
    session.expire_all()
    assert session.get(User, user.id).refresh_token == "rt-2"


def test_update_rejects_non_whitelisted_fields(repo, session):
    user = UserFactory(name="Jane")
    session.flush()

    repo.update(user, name="Janet")
    assert user.name == "Janet"
    with pytest.raises(ValueError):
        repo.update(user, refresh_token="x")


def test_paginate_ignores_unknown_sort_and_filters(repo, session):
    UserFactory(name="b", email="b@x.com")
    UserFactory(name="a", email="a@x.com")
    session.flush()

    page = repo.paginate(
        Pagination(page=1, limit=10, sort=["name", "password_hash"]),
        filters={"password_hash": "x", "email": None},
    )
    assert [u.name for u in page.items] == ["a", "b"]
    assert page.total == 2
