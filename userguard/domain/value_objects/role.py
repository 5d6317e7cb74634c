"""Role and token purpose enumerations."""

import enum


class Role(str, enum.Enum):
    """
    Account roles.

    Attributes:
        ADMIN: Administrative account, created by userguard-add-superuser
        USER: Regular account, the default for registration and social login
    """

    ADMIN = "admin"
    USER = "user"


class TokenPurpose(str, enum.Enum):
    """
    What a single-use token may be redeemed for.

    A user holds at most one unconsumed token per purpose.
    """

    RESET_PASSWORD = "reset_password"
    CONFIRM_EMAIL = "confirm_email"
