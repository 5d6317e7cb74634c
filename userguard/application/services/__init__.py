"""Application services."""

from userguard.application.services.authentication_service import AuthenticationService
from userguard.application.services.credential_store import CredentialStore
from userguard.application.services.social_identity_linker import SocialIdentityLinker
from userguard.application.services.token_issuer import TokenIssuer

__all__ = [
    "AuthenticationService",
    "CredentialStore",
    "SocialIdentityLinker",
    "TokenIssuer",
]
