"""
Security utilities shared by the token and session flows.

This module provides:
- Opaque token generation (confirmation, reset and refresh tokens)
- Token hashing with SHA-256 for storage
- Random password generation for the user commands
- Password strength validation
"""

import hashlib
import hmac
import re
import secrets
import string

from userguard.core.config import Settings

# 32 random bytes, ~43 URL-safe characters
TOKEN_BYTES = 32

GENERATED_PASSWORD_LENGTH = 20
SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{}|;:,.<>?"


# =============================================================================
# Opaque Tokens
# =============================================================================
# Tokens handed to users (email links, refresh tokens) are random strings.
# Only their SHA-256 digest is stored, so a database leak does not leak
# usable tokens. SHA-256 is sufficient: the input is already high-entropy.
# =============================================================================


def generate_token_value(nbytes: int = TOKEN_BYTES) -> str:
    """
    Generate a cryptographically random, URL-safe token value.

    Example:
        >>> value = generate_token_value()
        >>> len(value) >= 43
        True
    """
    return secrets.token_urlsafe(nbytes)


def hash_token(token: str) -> str:
    """
    Hash a token using SHA-256.

    Args:
        token: Plain token value

    Returns:
        SHA-256 hash of the token (64-character hex string)
    """
    return hashlib.sha256(token.encode()).hexdigest()


def verify_token_hash(token: str, token_hash: str) -> bool:
    """Compare a plain token against a stored digest in constant time."""
    return hmac.compare_digest(hash_token(token), token_hash)


def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    """
    Generate a random password that satisfies the default strength policy.

    Used by the user commands when no password is supplied.
    """
    alphabet = string.ascii_letters + string.digits + SPECIAL_CHARACTERS
    required = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
        secrets.choice(SPECIAL_CHARACTERS),
    ]
    rest = [secrets.choice(alphabet) for _ in range(max(length - len(required), 0))]
    chars = required + rest
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def validate_password_strength(
    password: str,
    settings: Settings,
) -> tuple[bool, str | None]:
    """
    Validate password strength against the configured policy.

    Default requirements:
    - Minimum 8 characters
    - At least 1 uppercase letter
    - At least 1 lowercase letter
    - At least 1 digit
    - At least 1 special character (!@#$%^&*()_+-=[]{}|;:,.<>?)

    Args:
        password: Password to validate
        settings: Settings carrying the password policy

    Returns:
        Tuple of (is_valid, error_message)
        - (True, None) if valid
        - (False, error_message) if invalid
    """
    if len(password) < settings.password_min_length:
        return False, (
            f"Password must be at least {settings.password_min_length} characters long"
        )

    if settings.password_require_uppercase and not re.search(r"[A-Z]", password):
        return False, "Password must contain at least one uppercase letter"

    if settings.password_require_lowercase and not re.search(r"[a-z]", password):
        return False, "Password must contain at least one lowercase letter"

    if settings.password_require_digit and not re.search(r"\d", password):
        return False, "Password must contain at least one digit"

    if settings.password_require_special and not re.search(
        r"[!@#$%^&*()_+\-=\[\]{}|;:,.<>?]", password
    ):
        return False, "Password must contain at least one special character"

    return True, None
