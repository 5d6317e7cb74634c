"""Social identity domain exceptions."""

from userguard.domain.exceptions.base import DomainException


class SocialDomainException(DomainException):
    """Base exception for social identity errors."""


class SocialIdentityNotFoundError(SocialDomainException):
    """Raised when no user is linked to a provider identity."""

    def __init__(self, provider: str, external_id: str | None = None):
        self.provider = provider
        self.external_id = external_id
        target = f"{provider}:{external_id}" if external_id else provider
        super().__init__(
            message=f"Social identity not found: {target}",
            code="SOCIAL_IDENTITY_NOT_FOUND"
        )


class SocialAccountAlreadyLinkedError(SocialDomainException):
    """Raised when a provider identity is already linked to another user."""

    def __init__(self, provider: str, external_id: str):
        self.provider = provider
        self.external_id = external_id
        super().__init__(
            message=f"Social account {provider}:{external_id} is already linked to another user",
            code="SOCIAL_ACCOUNT_ALREADY_LINKED"
        )


class ProviderAlreadyLinkedToUserError(SocialDomainException):
    """Raised when a user already has a different identity from the same provider."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(
            message=f"User already has a linked {provider} account",
            code="PROVIDER_ALREADY_LINKED"
        )


class SocialLoginDisabledError(SocialDomainException):
    """Raised when social login is off or the provider is not configured."""

    def __init__(self, provider: str | None = None):
        self.provider = provider
        message = "Social login is disabled"
        if provider:
            message = f"Social login is not available for provider: {provider}"
        super().__init__(message=message, code="SOCIAL_LOGIN_DISABLED")
