"""
Shared routine behind the user-creation commands.

Administrative creation skips the password strength policy and email
validation: the operator is trusted, and the account is usable at once.
"""

import asyncio
import logging
from uuid import uuid4

from userguard.application.dto.auth_dto import UserProfileOutput
from userguard.application.dto.command_dto import EXIT_FAILURE, EXIT_OK, CommandResult
from userguard.application.ports.outbound.password_hasher_port import PasswordHasherPort
from userguard.application.services.credential_store import CredentialStore
from userguard.core.security import generate_password
from userguard.domain.entities.user import User
from userguard.domain.exceptions import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    InvalidUsernameError,
    UsernameAlreadyExistsError,
)
from userguard.domain.value_objects.email import Email
from userguard.domain.value_objects.password_hash import PasswordHash
from userguard.domain.value_objects.role import Role
from userguard.domain.value_objects.username import Username

logger = logging.getLogger(__name__)

DEFAULT_EMAIL_DOMAIN = "example.com"


async def create_user(
    credential_store: CredentialStore,
    password_hasher: PasswordHasherPort,
    *,
    username: str,
    role: Role,
    is_superuser: bool = False,
    password: str | None = None,
    email: str | None = None,
) -> CommandResult:
    """
    Create an active account and report the outcome as a command result.

    Args:
        credential_store: User persistence
        password_hasher: Hasher for the initial password
        username: Desired username
        role: Role to assign
        is_superuser: Whether to grant the superuser flag
        password: Initial password. Generated and reported back when omitted.
        email: Email address. Defaults to ``<username>@example.com``.

    Returns:
        CommandResult with exit code 0 on success, 1 on duplicate or
        invalid input
    """
    generated_password = None
    if not password:
        password = generate_password()
        generated_password = password

    try:
        name = Username(username)
        address = Email(email or f"{name.value}@{DEFAULT_EMAIL_DOMAIN}")
    except (InvalidUsernameError, InvalidEmailError) as exc:
        logger.warning(f"User command rejected input: {exc.message}")
        return CommandResult(exit_code=EXIT_FAILURE, message=exc.message)

    digest = await asyncio.to_thread(password_hasher.hash, password)
    user = User(
        id=uuid4(),
        username=name,
        email=address,
        password_hash=PasswordHash(digest),
        role=role,
        is_superuser=is_superuser,
        is_active=True,
        email_verified=True,
    )

    try:
        created = await credential_store.create(user)
    except (UsernameAlreadyExistsError, EmailAlreadyExistsError) as exc:
        logger.warning(f"User command failed: {exc.message}")
        return CommandResult(exit_code=EXIT_FAILURE, message=exc.message)

    kind = "Superuser" if is_superuser else "User"
    message = f"{kind} added: {created.username.value} ({role.value})"
    if generated_password:
        message += f"\nGenerated password: {generated_password}"

    logger.info(f"{kind} created by command: {created.id} ({created.username})")
    return CommandResult(
        exit_code=EXIT_OK,
        message=message,
        user=UserProfileOutput.from_entity(created),
        generated_password=generated_password,
    )
