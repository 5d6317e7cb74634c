"""Security adapters: password hashing and access tokens."""

from userguard.infrastructure.security.access_token import JoseAccessTokenCodec
from userguard.infrastructure.security.password_hasher import Argon2PasswordHasher

__all__ = ["Argon2PasswordHasher", "JoseAccessTokenCodec"]
