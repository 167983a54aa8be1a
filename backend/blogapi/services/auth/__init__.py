from .dto import AuthSessionConfig, LoginIn, RefreshIn, RegisterIn, TokenPairOut, UserPublicOut
from .service import AuthSessionService

__all__ = [
    "AuthSessionService",
    "AuthSessionConfig",
    "RegisterIn",
    "LoginIn",
    "RefreshIn",
    "TokenPairOut",
    "UserPublicOut",
]
