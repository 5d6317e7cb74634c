"""
Password hashing with Argon2id.

Argon2id is memory-hard and resistant to GPU/ASIC attacks. Digests are
self-describing, so parameters can be raised later: needs_rehash() reports
digests created with older parameters and the login flow upgrades them.
"""

from argon2 import PasswordHasher
from argon2.exceptions import (
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from userguard.application.ports.outbound.password_hasher_port import PasswordHasherPort
from userguard.core.config import Settings


class Argon2PasswordHasher(PasswordHasherPort):
    """argon2-cffi implementation of PasswordHasherPort."""

    def __init__(self, settings: Settings):
        self._hasher = PasswordHasher(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
            hash_len=32,  # 32-byte output
            salt_len=16,  # 16-byte salt
        )

    def hash(self, password: str) -> str:
        """
        Hash a password using Argon2id.

        Example:
            >>> hasher.hash("my_secure_password")
            '$argon2id$v=19$m=65536,t=2,p=4$...'
        """
        return self._hasher.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Verify a password against an Argon2id hash.

        Returns:
            True if password matches hash, False otherwise (including
            malformed digests)
        """
        try:
            return self._hasher.verify(password_hash, password)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        try:
            return self._hasher.check_needs_rehash(password_hash)
        except InvalidHashError:
            return True
