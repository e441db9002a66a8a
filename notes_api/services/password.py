"""
Notes API — Password Hashing
==============================

What:  One-way password hashing and verification via passlib's CryptContext.
Who:   Used by AuthService on register (hash) and login (verify).

bcrypt is the default scheme; `pbkdf2_sha256` is available for environments
where the bcrypt backend cannot be loaded. The cost factor comes from
Settings.bcrypt_rounds (tests drop it to 4 so the suite stays fast).

Both methods are CPU-bound. AuthService calls them through
`run_in_threadpool` so they never run on the event loop.
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Thin wrapper around a CryptContext configured for a single scheme."""

    def __init__(self, scheme: str = "bcrypt", rounds: int | None = None):
        options = {}
        if scheme == "bcrypt" and rounds:
            options["bcrypt__rounds"] = rounds
        self.scheme = scheme
        self._context = CryptContext(schemes=[scheme], deprecated="auto", **options)

    def hash(self, plain: str) -> str:
        """Hash a plaintext password and return the encoded hash string."""
        if plain is None:
            raise ValueError("Password must not be None")
        return self._context.hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        """
        Verify a plaintext password against a stored hash.

        Returns False for a mismatch and for a stored value passlib cannot
        identify (corrupt row, unknown scheme) instead of raising.
        """
        if plain is None or hashed is None:
            return False
        try:
            return self._context.verify(plain, hashed)
        except ValueError:
            logger.warning("Stored password hash could not be identified")
            return False

    def dummy_verify(self) -> bool:
        """
        Spend the time of one verify without a stored hash; always False.

        Called on login for an unknown email so that the response time matches
        a wrong password for an existing account.
        """
        return self._context.dummy_verify()
