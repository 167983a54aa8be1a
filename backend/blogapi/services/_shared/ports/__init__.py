"""
blogapi.services._shared.ports
==============================

*Ports* (hexagonal interfaces) the service layer depends on for password
hashing and token management.

Modules
-------
- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`: one-way salted hashing and verification.

- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`: issuing and verifying signed tokens,
    together with the :class:`~.IssuedToken` and :class:`~.VerifiedToken`
    value objects.

Design Notes
------------
Concrete adapters live under ``blogapi.infra`` and are wired by the HTTP
layer; the services only see these contracts.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher
from .token_provider import IssuedToken, StubTokenProvider, TokenProvider, VerifiedToken

__all__ = [
    "PasswordHasher",
    "TokenProvider",
    "IssuedToken",
    "VerifiedToken",
    "StubTokenProvider",
]
