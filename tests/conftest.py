"""
Pytest configuration and fixtures for userguard tests.

This module provides:
- Settings built explicitly (never from the environment or a .env file)
- A controllable clock
- A mocked Unit of Work and mocked adapters for service tests
- Sample domain objects
"""

from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
from factories import (
    SOCIAL_PROVIDERS,
    FixedClock,
    build_auth_service,
    fake_hash,
    make_settings,
)

from userguard.application.services import CredentialStore, TokenIssuer
from userguard.domain.entities.user import User
from userguard.domain.value_objects.email import Email
from userguard.domain.value_objects.password_hash import PasswordHash
from userguard.domain.value_objects.username import Username


# ============================================================================
# Configuration
# ============================================================================
@pytest.fixture
def settings():
    """Default settings: registration open, email validation required."""
    return make_settings()


@pytest.fixture
def social_settings():
    """Social login enabled: google (login and linking), github (login only), twitter (incomplete)."""
    return make_settings(social_login_enabled=True, oauth_providers=SOCIAL_PROVIDERS)


@pytest.fixture
def clock():
    return FixedClock()


# ============================================================================
# Mocked adapters
# ============================================================================
@pytest.fixture
def mock_uow():
    """Create a mock Unit of Work."""
    uow = Mock()
    uow.users = AsyncMock()
    uow.social_identities = AsyncMock()
    uow.auth_tokens = AsyncMock()
    uow.sessions = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=None)  # Don't suppress exceptions

    # Writes echo the entity back, as the repositories do
    uow.users.add.side_effect = lambda user: user
    uow.users.update.side_effect = lambda user: user
    uow.social_identities.add.side_effect = lambda identity: identity
    uow.auth_tokens.add.side_effect = lambda token: token
    uow.auth_tokens.delete_active_for_user.return_value = 0
    uow.sessions.add.side_effect = lambda session: session
    uow.sessions.revoke.return_value = True
    uow.sessions.revoke_all_for_user.return_value = 0
    return uow


@pytest.fixture
def uow_factory(mock_uow):
    return lambda: mock_uow


@pytest.fixture
def dispatcher():
    """Create a mock event dispatcher."""
    mock = Mock()
    mock.emit = AsyncMock()
    return mock


@pytest.fixture
def password_hasher():
    """Create a mock password hasher."""
    hasher = Mock()
    hasher.hash.side_effect = fake_hash
    hasher.verify.side_effect = lambda password, digest: digest == fake_hash(password)
    hasher.needs_rehash.return_value = False
    return hasher


@pytest.fixture
def access_tokens():
    """Create a mock access token codec."""
    codec = Mock()
    codec.create_access_token.return_value = "access-token"
    return codec


# ============================================================================
# Services
# ============================================================================
@pytest.fixture
def credential_store(uow_factory):
    return CredentialStore(uow_factory)


@pytest.fixture
def token_issuer(uow_factory, dispatcher, clock):
    return TokenIssuer(uow_factory, dispatcher, clock=clock)


@pytest.fixture
def auth_service(settings, uow_factory, dispatcher, password_hasher, access_tokens, clock):
    return build_auth_service(
        settings, uow_factory, dispatcher, password_hasher, access_tokens, clock
    )


@pytest.fixture
def social_auth_service(
    social_settings, uow_factory, dispatcher, password_hasher, access_tokens, clock
):
    return build_auth_service(
        social_settings, uow_factory, dispatcher, password_hasher, access_tokens, clock
    )


# ============================================================================
# Sample data
# ============================================================================
@pytest.fixture
def sample_user():
    """Create an active user with a local password."""
    return User(
        id=uuid4(),
        username=Username("alice"),
        email=Email("alice@example.com"),
        password_hash=PasswordHash(fake_hash("Str0ng!Pass")),
        is_active=True,
        email_verified=True,
        first_name="Alice",
    )
