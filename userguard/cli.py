"""
Console entry points.

``userguard-add-superuser`` creates the bootstrap superuser. The username,
password and email come from settings (SUPERUSER_USERNAME,
SUPERUSER_PASSWORD, SUPERUSER_EMAIL); there are no command-line arguments.
"""

import asyncio
import sys

from userguard.application.commands.users_add_superuser import users_add_superuser
from userguard.application.dto.command_dto import CommandResult
from userguard.core.config import Settings, get_settings
from userguard.core.logging import setup_logging
from userguard.infrastructure.config.container import build_container


async def run_add_superuser(settings: Settings) -> CommandResult:
    """Build the container from settings and run the command once."""
    container = build_container(settings)
    try:
        password = settings.superuser_password
        return await users_add_superuser(
            container.credential_store,
            container.password_hasher,
            username=settings.superuser_username,
            password=password.get_secret_value() if password else None,
            email=settings.superuser_email,
        )
    finally:
        await container.close()


def add_superuser() -> None:
    """Entry point for ``userguard-add-superuser``. Exits with the command's code."""
    settings = get_settings()
    setup_logging(settings)

    result = asyncio.run(run_add_superuser(settings))
    print(result.message, file=sys.stdout if result.ok else sys.stderr)
    sys.exit(result.exit_code)


if __name__ == "__main__":
    add_superuser()
