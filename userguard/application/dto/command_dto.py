"""Command layer DTOs."""

from typing import Optional

from pydantic import BaseModel, Field

from userguard.application.dto.auth_dto import UserProfileOutput

EXIT_OK = 0
EXIT_FAILURE = 1


class CommandResult(BaseModel):
    """Outcome of an administrative command."""

    exit_code: int = Field(..., description="0 on success, 1 on failure")
    message: str = Field(..., description="Human-readable outcome")
    user: Optional[UserProfileOutput] = Field(None, description="Created user")
    generated_password: Optional[str] = Field(
        None, repr=False, description="Password generated because none was supplied"
    )

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return self.exit_code == EXIT_OK
