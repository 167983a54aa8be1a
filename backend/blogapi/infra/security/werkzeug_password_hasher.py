# blogapi/infra/security/werkzeug_password_hasher.py
from __future__ import annotations

import threading

from werkzeug.security import check_password_hash, generate_password_hash

from blogapi.services._shared.ports import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    """
    Adapter over :mod:`werkzeug.security` salted hashes.

    Hashing is deliberately expensive (``scrypt`` by default), so a bounded
    semaphore caps how many computations run at once in this process. Other
    request threads queue on the semaphore instead of saturating every core.

    :param method: Werkzeug method string, e.g. ``"scrypt"`` or
        ``"pbkdf2:sha256:600000"``.
    :param max_concurrent: Maximum simultaneous hash/verify calls.
    :param salt_length: Salt length in characters.
    """

    def __init__(self, method: str = "scrypt", max_concurrent: int = 4, salt_length: int = 16):
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")
        self.method = method
        self.salt_length = salt_length
        self.max_concurrent = max_concurrent
        self._slots = threading.BoundedSemaphore(max_concurrent)

    def hash(self, plaintext: str) -> str:
        with self._slots:
            return generate_password_hash(
                plaintext, method=self.method, salt_length=self.salt_length
            )

    def verify(self, plaintext: str, digest: str | None) -> bool:
        if not digest or plaintext is None:
            return False
        with self._slots:
            try:
                return bool(check_password_hash(digest, plaintext))
            except ValueError:
                # Unknown method or a digest without the "method$salt$hash" layout.
                return False
