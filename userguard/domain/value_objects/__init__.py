"""Domain value objects."""

from userguard.domain.value_objects.email import Email
from userguard.domain.value_objects.password_hash import PasswordHash
from userguard.domain.value_objects.role import Role, TokenPurpose
from userguard.domain.value_objects.username import Username

__all__ = ["Email", "PasswordHash", "Role", "TokenPurpose", "Username"]
