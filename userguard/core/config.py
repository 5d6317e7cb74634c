"""
Core configuration module using Pydantic Settings.

This module defines all userguard settings loaded from environment variables.
All configuration must go through this Settings class - NO hardcoded values.

Settings are read once per process through get_settings(). Hosts that need a
different configuration (tests, multi-tenant setups) build a Settings instance
explicitly and pass it to build_container().
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, PostgresDsn, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from userguard.domain.value_objects.role import Role

SUPPORTED_RECAPTCHA_VERSIONS = (2, 3)

DEFAULT_PASSWORD_METER_MESSAGES = [
    "Password is too weak",
    "Password is weak",
    "Password is fair",
    "Password is strong",
    "Password is very strong",
]


class OAuthProviderSettings(BaseModel):
    """
    Per-provider OAuth configuration.

    A provider is offered as a login option only when client_id,
    client_secret and redirect_uri are all set. It is offered for linking
    to an existing account only when link_social_uri and
    callback_link_social_uri are set as well.
    """

    client_id: str | None = None
    client_secret: SecretStr | None = None
    redirect_uri: str | None = None
    link_social_uri: str | None = None
    callback_link_social_uri: str | None = None
    label: str | None = None

    @property
    def supports_login(self) -> bool:
        """Check whether the provider can be used to log in."""
        return bool(self.client_id and self.client_secret and self.redirect_uri)

    @property
    def supports_linking(self) -> bool:
        """Check whether the provider can be linked to an existing account."""
        return self.supports_login and bool(
            self.link_social_uri and self.callback_link_social_uri
        )


class Settings(BaseSettings):
    """
    Userguard settings loaded from environment variables.

    All settings are loaded from .env file or environment variables.
    Settings are validated using Pydantic with type hints.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = Field(default="userguard")
    environment: Literal["development", "staging", "production"] = Field(default="development")
    debug: bool = Field(default=False)

    # -------------------------------------------------------------------------
    # Security Settings
    # -------------------------------------------------------------------------
    secret_key: str = Field(
        ...,
        min_length=32,
        description="Secret key for JWT signing. Must be at least 32 characters."
    )

    # JWT Token Configuration
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=15, ge=1, le=60)
    refresh_token_expire_days: int = Field(default=7, ge=1, le=30)

    # Argon2id Password Hashing Configuration
    argon2_time_cost: int = Field(default=2, ge=1, le=10)
    argon2_memory_cost: int = Field(default=65536, ge=8192)  # 64 MB
    argon2_parallelism: int = Field(default=4, ge=1, le=16)

    # Password policy (registration, change and reset flows)
    password_min_length: int = Field(default=8, ge=1, le=128)
    password_require_uppercase: bool = Field(default=True)
    password_require_lowercase: bool = Field(default=True)
    password_require_digit: bool = Field(default=True)
    password_require_special: bool = Field(default=True)

    # Password meter presentation, exposed to hosts that render a form
    password_meter_required_score: int = Field(default=3, ge=0, le=4)
    password_meter_show_message: bool = Field(default=True)
    password_meter_messages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PASSWORD_METER_MESSAGES)
    )

    # -------------------------------------------------------------------------
    # Registration & Token Lifetimes
    # -------------------------------------------------------------------------
    registration_enabled: bool = Field(default=True)
    email_validation_required: bool = Field(default=True)
    default_role: Role = Field(default=Role.USER)

    reset_password_token_ttl_seconds: int = Field(default=3600, ge=0)
    confirm_email_token_ttl_seconds: int = Field(default=86400, ge=0)

    # -------------------------------------------------------------------------
    # Social Login
    # -------------------------------------------------------------------------
    social_login_enabled: bool = Field(default=False)
    oauth_providers: dict[str, OAuthProviderSettings] = Field(default_factory=dict)
    social_username_policy: Literal["suffix", "fail"] = Field(default="suffix")
    social_username_max_suffix: int = Field(default=50, ge=1, le=1000)

    @field_validator("oauth_providers")
    @classmethod
    def normalize_provider_names(
        cls, v: dict[str, OAuthProviderSettings]
    ) -> dict[str, OAuthProviderSettings]:
        """Provider names are matched case-insensitively."""
        return {name.strip().lower(): provider for name, provider in v.items()}

    # -------------------------------------------------------------------------
    # reCAPTCHA
    # -------------------------------------------------------------------------
    recaptcha_enabled: bool = Field(default=False)
    recaptcha_key: str | None = Field(default=None)
    recaptcha_version: int = Field(default=2)
    recaptcha_theme: Literal["light", "dark"] = Field(default="light")
    recaptcha_size: Literal["normal", "compact", "invisible"] = Field(default="normal")

    @field_validator("recaptcha_version")
    @classmethod
    def check_recaptcha_version(cls, v: int) -> int:
        """Only reCAPTCHA v2 and v3 are supported."""
        if v not in SUPPORTED_RECAPTCHA_VERSIONS:
            raise ValueError(
                f"reCAPTCHA version {v} is not supported, "
                f"expected one of {SUPPORTED_RECAPTCHA_VERSIONS}"
            )
        return v

    # -------------------------------------------------------------------------
    # Database Configuration
    # -------------------------------------------------------------------------
    database_url: PostgresDsn = Field(
        ...,
        description="PostgreSQL connection string with asyncpg driver"
    )

    # Connection Pool Settings
    db_pool_size: int = Field(default=5, ge=1, le=50)
    db_max_overflow: int = Field(default=10, ge=0, le=100)
    db_pool_recycle: int = Field(default=3600, ge=300)  # Seconds
    db_pool_pre_ping: bool = Field(default=True)

    # -------------------------------------------------------------------------
    # Bootstrap Superuser (userguard-add-superuser)
    # -------------------------------------------------------------------------
    superuser_username: str = Field(default="superadmin")
    superuser_password: SecretStr | None = Field(default=None)
    superuser_email: str | None = Field(default=None)

    # -------------------------------------------------------------------------
    # Logging Configuration
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")
    log_file_enabled: bool = Field(default=False)
    log_file_path: str = Field(default="logs/userguard.log")
    log_file_max_bytes: int = Field(default=10485760)  # 10 MB
    log_file_backup_count: int = Field(default=5)

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------
    @property
    def database_url_str(self) -> str:
        """Get database URL as string."""
        return str(self.database_url)

    @property
    def login_providers(self) -> dict[str, OAuthProviderSettings]:
        """Providers fully configured for social login, empty when disabled."""
        if not self.social_login_enabled:
            return {}
        return {
            name: provider
            for name, provider in self.oauth_providers.items()
            if provider.supports_login
        }


@lru_cache
def get_settings() -> Settings:
    """
    Return the process-wide settings instance.

    Settings are read from the environment on first call and cached.
    """
    return Settings()
