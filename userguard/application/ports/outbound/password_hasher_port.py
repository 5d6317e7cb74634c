"""Password hasher port interface."""

from typing import Protocol


class PasswordHasherPort(Protocol):
    """
    One-way password hashing.

    Implementations are synchronous and CPU-bound. Services call them
    through asyncio.to_thread so the event loop never blocks on hashing.
    """

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Returns:
            Self-describing digest (algorithm, parameters, salt, hash)
        """
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a plaintext password against a digest.

        Returns:
            True on match. False on mismatch or malformed digest.
        """
        ...

    def needs_rehash(self, password_hash: str) -> bool:
        """Check whether a digest was produced with outdated parameters."""
        ...
