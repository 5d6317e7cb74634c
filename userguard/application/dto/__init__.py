"""Data transfer objects."""

from userguard.application.dto.auth_dto import (
    IssuedToken,
    LoginInput,
    LoginProvider,
    ProviderConnection,
    RegisterUserInput,
    RegistrationResult,
    TokenValidation,
    UserProfileOutput,
)
from userguard.application.dto.command_dto import EXIT_FAILURE, EXIT_OK, CommandResult

__all__ = [
    "CommandResult",
    "EXIT_FAILURE",
    "EXIT_OK",
    "IssuedToken",
    "LoginInput",
    "LoginProvider",
    "ProviderConnection",
    "RegisterUserInput",
    "RegistrationResult",
    "TokenValidation",
    "UserProfileOutput",
]
