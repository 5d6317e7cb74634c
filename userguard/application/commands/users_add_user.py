"""Command: create a regular user account."""

from userguard.application.commands.create_user import create_user
from userguard.application.dto.command_dto import CommandResult
from userguard.application.ports.outbound.password_hasher_port import PasswordHasherPort
from userguard.application.services.credential_store import CredentialStore
from userguard.domain.value_objects.role import Role


async def users_add_user(
    credential_store: CredentialStore,
    password_hasher: PasswordHasherPort,
    username: str,
    password: str | None = None,
    email: str | None = None,
    role: Role = Role.USER,
) -> CommandResult:
    """Create an active account with the given role (``user`` by default)."""
    return await create_user(
        credential_store,
        password_hasher,
        username=username,
        password=password,
        email=email,
        role=role,
        is_superuser=False,
    )
