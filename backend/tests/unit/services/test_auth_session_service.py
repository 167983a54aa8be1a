# tests/unit/services/test_auth_session_service.py
from __future__ import annotations

import logging

import pytest
from blogapi.models.user import User
from blogapi.repositories.user import UserRepository
from blogapi.services._shared.base import AuthenticatedContext
from blogapi.services._shared.errors import (
    AuthError,
    ConflictError,
    IssuanceError,
    ValidationError,
)
from blogapi.services._shared.ports.token_provider import StubTokenProvider
from blogapi.services.auth.dto import (
    AuthSessionConfig,
    LoginIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    UserPublicOut,
)
from blogapi.services.auth.service import AuthSessionService
from tests.factories.user import UserFactory


class _BrokenRefreshIssuer(StubTokenProvider):
    """Signs access tokens but fails on refresh tokens."""

    def issue_refresh_token(self, user_id: int) -> str:
        raise IssuanceError()


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def tokens() -> StubTokenProvider:
    return StubTokenProvider()


@pytest.fixture()
def service(app, tokens, hasher) -> AuthSessionService:
    """AuthSessionService wired to the stub token provider and a cheap hasher."""
    return AuthSessionService(token_provider=tokens, password_hasher=hasher)


# ------------------------------- Register --------------------------------- #
def test_register_hashes_password_and_returns_public_fields(service, session):
    out = service.register(RegisterIn(name="Jane", email="Jane@X.com", password="abc12345"))

    assert isinstance(out, UserPublicOut)
    assert out.name == "Jane"
    assert out.email == "jane@x.com"

    stored = session.get(User, out.id)
    assert stored.password_hash != "abc12345"
    assert service.hasher.verify("abc12345", stored.password_hash)
    assert stored.refresh_token is None


@pytest.mark.parametrize(
    ("payload", "field"),
    [
        ({"name": "", "email": "a@x.com", "password": "abc12345"}, "name"),
        ({"name": "A", "email": "not-an-email", "password": "abc12345"}, "email"),
        ({"name": "A", "email": "a@x.com", "password": "abc1"}, "password"),
        ({"name": "A", "email": "a@x.com", "password": "abcdefgh"}, "password"),
        ({"name": "A", "email": "a@x.com", "password": "12345678"}, "password"),
    ],
)
def test_register_rejects_policy_violations(service, payload, field):
    with pytest.raises(ValidationError) as excinfo:
        service.register(RegisterIn(**payload))
    assert field in excinfo.value.messages


def test_register_duplicate_email_is_case_insensitive(service):
    service.register(RegisterIn(name="Jane", email="jane@x.com", password="abc12345"))

    with pytest.raises(ConflictError) as excinfo:
        service.register(RegisterIn(name="Other", email="JANE@x.com ", password="xyz98765"))
    assert excinfo.value.detail == "Email already registered"


def test_register_maps_unique_violation_on_concurrent_insert(service, monkeypatch):
    service.register(RegisterIn(name="Jane", email="A@x.com", password="abc12345"))
    # The row appears between the existence check and the insert.
    monkeypatch.setattr(UserRepository, "exists_by_email", lambda self, email: False)

    with pytest.raises(ConflictError) as excinfo:
        service.register(RegisterIn(name="Other", email="A@x.com", password="xyz98765"))
    assert (excinfo.value.entity, excinfo.value.detail) == ("User", "Email already registered")


class _TransactionAwareHasher:
    """Delegates to a real hasher and records whether a transaction is open."""

    def __init__(self, inner, session):
        self.inner = inner
        self.session = session
        self.open_during: list[bool] = []

    def hash(self, plaintext: str) -> str:
        self.open_during.append(self.session().in_transaction())
        return self.inner.hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        self.open_during.append(self.session().in_transaction())
        return self.inner.verify(plaintext, digest)


def test_hashing_runs_outside_database_transactions(app, tokens, hasher, session):
    recording = _TransactionAwareHasher(hasher, session)
    service = AuthSessionService(token_provider=tokens, password_hasher=recording)

    service.register(RegisterIn(name="Jane", email="a@x.com", password="abc12345"))
    service.login(LoginIn(email="a@x.com", password="abc12345"))
    with pytest.raises(AuthError):
        service.login(LoginIn(email="a@x.com", password="wrong-pass1"))

    assert recording.open_during == [False, False, False]


# -------------------------------- Login ----------------------------------- #
def test_login_issues_pair_and_stores_refresh_token(service, session):
    user = UserFactory(email="a@a.com", password="abc12345")
    session.flush()

    pair = service.login(LoginIn(email="A@a.com", password="abc12345"))

    assert isinstance(pair, TokenPairOut)
    assert pair.access_token.startswith("access.")
    assert pair.refresh_token.startswith("refresh.")
    assert pair.token_type == "bearer"
    assert pair.expires_in == 3600
    assert session.get(User, user.id).refresh_token == pair.refresh_token


@pytest.mark.parametrize(
    ("email", "password"),
    [("a@a.com", "wrong-pass1"), ("missing@example.com", "abc12345")],
)
def test_login_failures_are_indistinguishable(service, session, email, password):
    UserFactory(email="a@a.com", password="abc12345")
    session.flush()

    with pytest.raises(AuthError) as excinfo:
        service.login(LoginIn(email=email, password=password))
    assert excinfo.value.message == "Invalid credentials"


def test_second_login_invalidates_previous_refresh_token(service, session):
    UserFactory(email="a@a.com", password="abc12345")
    session.flush()

    first = service.login(LoginIn(email="a@a.com", password="abc12345"))
    second = service.login(LoginIn(email="a@a.com", password="abc12345"))

    with pytest.raises(AuthError):
        service.refresh(RefreshIn(refresh_token=first.refresh_token))
    assert service.refresh(RefreshIn(refresh_token=second.refresh_token)).access_token


def test_login_issuance_failure_leaves_stored_token_untouched(app, hasher, session):
    user = UserFactory(email="a@a.com", password="abc12345", refresh_token="previous")
    session.commit()
    service = AuthSessionService(token_provider=_BrokenRefreshIssuer(), password_hasher=hasher)

    with pytest.raises(IssuanceError):
        service.login(LoginIn(email="a@a.com", password="abc12345"))

    session.expire_all()
    assert session.get(User, user.id).refresh_token == "previous"


# ------------------------------- Refresh ---------------------------------- #
@pytest.mark.parametrize("presented", [None, "", "   "])
def test_refresh_requires_a_token(service, presented):
    with pytest.raises(AuthError) as excinfo:
        service.refresh(RefreshIn(refresh_token=presented))
    assert excinfo.value.message == "Refresh token not provided"


def test_refresh_rotates_and_blocks_reuse(service, session):
    user = UserFactory(password="abc12345")
    session.flush()
    pair1 = service.login(LoginIn(email=user.email, password="abc12345"))

    pair2 = service.refresh(RefreshIn(refresh_token=pair1.refresh_token))
    assert pair2.refresh_token != pair1.refresh_token
    assert session.get(User, user.id).refresh_token == pair2.refresh_token

    with pytest.raises(AuthError) as excinfo:
        service.refresh(RefreshIn(refresh_token=pair1.refresh_token))
    assert excinfo.value.message == "Invalid refresh token"


def test_refresh_rejects_never_issued_token(service):
    with pytest.raises(AuthError):
        service.refresh(RefreshIn(refresh_token="refresh.1.999"))


def test_refresh_rejects_expired_token_even_when_stored(service, tokens, session):
    user = UserFactory(password="abc12345")
    session.flush()
    pair = service.login(LoginIn(email=user.email, password="abc12345"))
    tokens.expire(pair.refresh_token)

    with pytest.raises(AuthError):
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))
    # Rejection does not consume the stored value.
    assert session.get(User, user.id).refresh_token == pair.refresh_token


def test_refresh_store_equality_only_when_verification_disabled(app, tokens, hasher, session):
    service = AuthSessionService(
        token_provider=tokens,
        password_hasher=hasher,
        config=AuthSessionConfig(verify_refresh_signature=False),
    )
    user = UserFactory(password="abc12345")
    session.flush()
    pair = service.login(LoginIn(email=user.email, password="abc12345"))
    tokens.expire(pair.refresh_token)

    rotated = service.refresh(RefreshIn(refresh_token=pair.refresh_token))
    assert rotated.refresh_token != pair.refresh_token


def test_refresh_rejects_token_issued_for_another_user(service, tokens, session):
    user = UserFactory()
    foreign = tokens.issue_refresh_token(user.id + 100)
    user.refresh_token = foreign
    session.flush()

    with pytest.raises(AuthError):
        service.refresh(RefreshIn(refresh_token=foreign))


def test_refresh_fails_when_token_was_rotated_concurrently(service, session, monkeypatch):
    user = UserFactory(password="abc12345")
    session.flush()
    pair = service.login(LoginIn(email=user.email, password="abc12345"))

    monkeypatch.setattr(
        UserRepository, "swap_refresh_token", lambda self, user_id, *, expected, new: False
    )
    with pytest.raises(AuthError) as excinfo:
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))
    assert excinfo.value.message == "Invalid refresh token"


# ----------------------------- Current user ------------------------------- #
def test_current_user_returns_profile(service, session):
    user = UserFactory(name="Jane", email="jane@x.com")
    session.flush()

    out = service.current_user(AuthenticatedContext(user_id=user.id))
    assert (out.id, out.name, out.email) == (user.id, "Jane", "jane@x.com")


def test_current_user_missing_row_is_auth_error(service):
    with pytest.raises(AuthError):
        service.current_user(AuthenticatedContext(user_id=424242))


# ------------------------------- Logging ---------------------------------- #
def test_passwords_and_tokens_never_reach_the_logs(service, session, caplog):
    caplog.set_level(logging.DEBUG)

    service.register(RegisterIn(name="Jane", email="jane@x.com", password="s3cretPassw0rd"))
    with pytest.raises(AuthError):
        service.login(LoginIn(email="jane@x.com", password="wrongPassw0rd"))
    pair = service.login(LoginIn(email="jane@x.com", password="s3cretPassw0rd"))

    messages = [r.getMessage() for r in caplog.records]
    assert "auth.register.succeeded" in messages
    assert "auth.login.failed" in messages
    assert "auth.login.succeeded" in messages
    for record in caplog.records:
        dumped = repr(record.__dict__)
        assert "s3cretPassw0rd" not in dumped
        assert "wrongPassw0rd" not in dumped
        assert pair.refresh_token not in dumped
