from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """
    Port for one-way password hashing.

    Implementations must salt every digest, so hashing the same plaintext twice
    yields different values. :meth:`verify` is the only valid equality check.
    """

    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """Return ``True`` when ``plaintext`` matches ``digest``.

        A malformed or empty digest returns ``False`` instead of raising.
        """
        ...
