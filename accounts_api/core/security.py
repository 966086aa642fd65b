"""Security helpers (hashing and verification)."""

from __future__ import annotations

from argon2 import PasswordHasher, exceptions as argon_exc

from .config import Settings


class CredentialHasher:
    """Argon2 password hashing with a tunable cost."""

    def __init__(self, time_cost: int = 3, memory_cost: int = 65536):
        self._ph = PasswordHasher(time_cost=max(1, time_cost), memory_cost=max(1024, memory_cost))

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialHasher":
        return cls(
            time_cost=settings.password_hash_time_cost,
            memory_cost=settings.password_hash_memory_cost,
        )

    def hash(self, secret: str) -> str:
        """Create a salted Argon2 hash; every call uses a fresh salt."""
        return self._ph.hash(secret or "")

    def verify(self, secret: str, stored_hash: str | None) -> bool:
        """
        Check a plaintext against a stored hash.

        An empty stored hash means no password was set and yields False,
        the same as a mismatch or an unreadable hash.
        """
        stored = stored_hash or ""
        if not stored:
            return False
        try:
            return self._ph.verify(stored, secret or "")
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False

    def needs_rehash(self, stored_hash: str | None) -> bool:
        if not stored_hash:
            return False
        try:
            return self._ph.check_needs_rehash(stored_hash)
        except argon_exc.InvalidHashError:
            return True

