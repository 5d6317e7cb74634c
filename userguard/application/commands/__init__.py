"""Administrative commands."""

from userguard.application.commands.create_user import create_user
from userguard.application.commands.users_add_superuser import users_add_superuser
from userguard.application.commands.users_add_user import users_add_user

__all__ = ["create_user", "users_add_superuser", "users_add_user"]
