# blogapi/services/auth/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from blogapi.models.user import User
from blogapi.services._shared.base import AuthenticatedContext, BaseService
from blogapi.services._shared.errors import (
    AuthError,
    ConflictError,
    InvalidTokenError,
    IssuanceError,
    ValidationError,
    violates,
)
from blogapi.services._shared.policies.credentials import normalize_email, validate_registration
from blogapi.services._shared.ports import PasswordHasher, TokenProvider
from blogapi.services.auth.dto import (
    AuthSessionConfig,
    LoginIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    UserPublicOut,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
MISSING_REFRESH_TOKEN = "Refresh token not provided"
INVALID_REFRESH_TOKEN = "Invalid refresh token"


class AuthSessionService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh).

    Each user holds at most one refresh token, stored verbatim on the user
    row. Login overwrites it; refresh swaps it for a new one, so every refresh
    token can be used once and a later login silently invalidates the previous
    session.

    Only user ids are logged. Passwords and tokens never reach the logs.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        password_hasher: PasswordHasher,
        config: AuthSessionConfig | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_provider: Adapter issuing and verifying JWTs.
        :param password_hasher: Adapter hashing and verifying passwords.
        :param config: Session policy (refresh verification switch).
        """
        super().__init__()
        self.tokens = token_provider
        self.hasher = password_hasher
        self.cfg = config or AuthSessionConfig()

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> UserPublicOut:
        """
        Create a user with a hashed password.

        :param dto: Registration input.
        :returns: Public fields of the new user.
        :raises ValidationError: If name, email or password break the policy.
        :raises ConflictError: If the email is already registered.
        """
        errors = validate_registration(name=dto.name, email=dto.email, password=dto.password)
        if errors:
            raise ValidationError(errors)

        email = normalize_email(dto.email)
        # Hashing may wait on the hasher; keep it outside the transaction.
        password_hash = self.hasher.hash(dto.password)
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(email):
                    raise ConflictError("User", "Email already registered")
                user = uow.users.add(
                    User(name=dto.name.strip(), email=email, password_hash=password_hash)
                )
                out = UserPublicOut.from_model(user)
        except IntegrityError as exc:
            # Concurrent registration slipped past the existence check.
            if violates(exc, "uq_users_email"):
                raise ConflictError("User", "Email already registered") from exc
            raise

        logger.info("auth.register.succeeded", extra={"user_id": out.id})
        return out

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a fresh token pair.

        Unknown email and wrong password fail identically.

        :param dto: Login input.
        :returns: Access/Refresh token pair.
        :raises AuthError: If credentials are invalid.
        :raises IssuanceError: If tokens cannot be signed; nothing is stored.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(dto.email or "")
            user_id, password_hash = (user.id, user.password_hash) if user else (None, None)

        # Verification runs with no transaction open.
        if password_hash is None or not self.hasher.verify(dto.password or "", password_hash):
            logger.info("auth.login.failed", extra={"user_id": user_id})
            raise AuthError(INVALID_CREDENTIALS)

        pair = self._issue_pair(user_id)
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise AuthError(INVALID_CREDENTIALS)
            uow.users.set_refresh_token(user, pair.refresh_token)

        logger.info("auth.login.succeeded", extra={"user_id": user_id})
        return pair

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange the stored refresh token for a new pair.

        The presented value must equal the one stored on a user row. When
        ``verify_refresh_signature`` is on, it must then also verify as an
        unexpired refresh token for that same user. The swap to the new token
        is conditional on the old value, so a token can only be rotated once.

        :param dto: Refresh input.
        :returns: New access/refresh token pair.
        :raises AuthError: If the token is missing, unknown, expired or
            already rotated.
        """
        presented = (dto.refresh_token or "").strip()
        if not presented:
            raise AuthError(MISSING_REFRESH_TOKEN)

        with self.rw_uow() as uow:
            user = uow.users.get_by_refresh_token(presented)
            if user is None:
                logger.info("auth.refresh.rejected", extra={"code": "unknown_token"})
                raise AuthError(INVALID_REFRESH_TOKEN)

            if self.cfg.verify_refresh_signature:
                self._verify_refresh(presented, user.id)

            pair = self._issue_pair(user.id)
            if not uow.users.swap_refresh_token(
                user.id, expected=presented, new=pair.refresh_token
            ):
                logger.info(
                    "auth.refresh.rejected",
                    extra={"user_id": user.id, "code": "rotated_concurrently"},
                )
                raise AuthError(INVALID_REFRESH_TOKEN)
            user_id = user.id

        logger.info("auth.refresh.rotated", extra={"user_id": user_id})
        return pair

    # ------------------------------------------------------------------ #
    # Current user
    # ------------------------------------------------------------------ #

    def current_user(self, ctx: AuthenticatedContext) -> UserPublicOut:
        """
        Return the user behind an authenticated context.

        :raises AuthError: If the user no longer exists.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(ctx.user_id)
            if user is None:
                raise AuthError()
            return UserPublicOut.from_model(user)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _issue_pair(self, user_id: int) -> TokenPairOut:
        try:
            access = self.tokens.issue_access_token(user_id)
            refresh = self.tokens.issue_refresh_token(user_id)
        except IssuanceError:
            logger.error("auth.token.issuance_failed", extra={"user_id": user_id}, exc_info=True)
            raise
        return TokenPairOut(
            access_token=access.token,
            refresh_token=refresh,
            expires_in=access.expires_in,
        )

    def _verify_refresh(self, token: str, user_id: int) -> None:
        try:
            verified = self.tokens.verify(token, refresh=True)
        except InvalidTokenError as exc:
            logger.info(
                "auth.refresh.rejected",
                extra={"user_id": user_id, "code": "verification_failed"},
            )
            raise AuthError(INVALID_REFRESH_TOKEN) from exc
        if verified.user_id != user_id:
            logger.warning(
                "auth.refresh.rejected",
                extra={"user_id": user_id, "code": "subject_mismatch"},
            )
            raise AuthError(INVALID_REFRESH_TOKEN)
