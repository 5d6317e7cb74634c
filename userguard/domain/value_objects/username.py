"""Username value object."""

import re
from dataclasses import dataclass

from userguard.domain.exceptions import InvalidUsernameError


USERNAME_REGEX = re.compile(r"^[a-z0-9_.-]+$")
MIN_LENGTH = 3
MAX_LENGTH = 50


@dataclass(frozen=True)
class Username:
    """
    Username value object with validation.

    Immutable value object representing a username. Usernames are
    normalised to lowercase, so lookups and the uniqueness constraint
    are case-insensitive.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate username."""
        normalized = self.value.strip().lower()

        if not normalized:
            raise InvalidUsernameError(normalized, "Username cannot be empty")

        if len(normalized) < MIN_LENGTH:
            raise InvalidUsernameError(
                normalized,
                f"Username must be at least {MIN_LENGTH} characters long"
            )

        if len(normalized) > MAX_LENGTH:
            raise InvalidUsernameError(
                normalized,
                f"Username must be at most {MAX_LENGTH} characters long"
            )

        if not USERNAME_REGEX.match(normalized):
            raise InvalidUsernameError(
                normalized,
                "Username can only contain letters, numbers, dots, hyphens, and underscores"
            )

        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Username(value={self.value!r})"

    def with_suffix(self, n: int) -> "Username":
        """
        Return ``<name>_<n>``, trimming the base so the result still fits.

        Used to find a free username when a social login collides with an
        existing account.
        """
        suffix = f"_{n}"
        base = self.value[: MAX_LENGTH - len(suffix)]
        return Username(f"{base}{suffix}")
