"""Command: create a superuser."""

from userguard.application.commands.create_user import create_user
from userguard.application.dto.command_dto import CommandResult
from userguard.application.ports.outbound.password_hasher_port import PasswordHasherPort
from userguard.application.services.credential_store import CredentialStore
from userguard.domain.value_objects.role import Role

DEFAULT_SUPERUSER_USERNAME = "superadmin"


async def users_add_superuser(
    credential_store: CredentialStore,
    password_hasher: PasswordHasherPort,
    username: str = DEFAULT_SUPERUSER_USERNAME,
    password: str | None = None,
    email: str | None = None,
) -> CommandResult:
    """Create an admin account with the superuser flag."""
    return await create_user(
        credential_store,
        password_hasher,
        username=username or DEFAULT_SUPERUSER_USERNAME,
        password=password,
        email=email,
        role=Role.ADMIN,
        is_superuser=True,
    )
