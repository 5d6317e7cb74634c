"""
End-to-end flows against PostgreSQL.

These exercise the constraints that only the database can enforce:
unique usernames and emails, one active token per (user, purpose), one
owner per provider identity and conditional consumption.
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from factories import requires_database

from userguard.application.commands import users_add_superuser
from userguard.application.dto.auth_dto import LoginInput, RegisterUserInput
from userguard.core.security import hash_token
from userguard.domain.entities.auth_token import AuthToken
from userguard.domain.entities.user import User
from userguard.domain.events import AuthEvent
from userguard.domain.exceptions import (
    AccountInactiveError,
    ActiveTokenConflictError,
    EmailAlreadyExistsError,
    SessionRevokedError,
    SocialAccountAlreadyLinkedError,
    TokenAlreadyConsumedError,
    TokenNotFoundError,
    UsernameAlreadyExistsError,
)
from userguard.domain.value_objects.email import Email
from userguard.domain.value_objects.role import TokenPurpose
from userguard.domain.value_objects.username import Username

pytestmark = [pytest.mark.integration, requires_database]

PASSWORD = "Str0ng!Pass"


async def register(container, username="alice", email="alice@example.com"):
    return await container.auth_service.register(
        RegisterUserInput(username=username, password=PASSWORD, email=email)
    )


class TestRegistrationAndLogin:
    @pytest.mark.asyncio
    async def test_register_confirm_login_refresh(self, container, recorded_events):
        registration = await register(container)

        with pytest.raises(AccountInactiveError):
            await container.auth_service.login(LoginInput(username="alice", password=PASSWORD))

        profile = await container.auth_service.confirm_email(
            registration.confirmation_token.value
        )
        assert profile.is_active and profile.email_verified

        session = await container.auth_service.login(
            LoginInput(username="ALICE", password=PASSWORD)
        )
        claims = container.access_tokens.decode_access_token(session.access_token)
        assert claims["sub"] == str(profile.id)

        rotated = await container.auth_service.refresh_session(session.refresh_token)
        assert rotated.family_id == session.family_id

        # The rotated-out token is now a reuse: the whole family is revoked
        with pytest.raises(SessionRevokedError):
            await container.auth_service.refresh_session(session.refresh_token)
        with pytest.raises(SessionRevokedError):
            await container.auth_service.refresh_session(rotated.refresh_token)

        assert recorded_events[:3] == [
            AuthEvent.BEFORE_REGISTER,
            AuthEvent.AFTER_REGISTER,
            AuthEvent.AFTER_LOGIN,
        ]

    @pytest.mark.asyncio
    async def test_duplicate_username_and_email(self, container):
        await register(container)

        with pytest.raises(UsernameAlreadyExistsError):
            await register(container, username="Alice", email="other@example.com")
        with pytest.raises(EmailAlreadyExistsError):
            await register(container, username="bob", email="ALICE@example.com")

    @pytest.mark.asyncio
    async def test_unique_index_backs_up_precheck(self, container):
        """Inserting past the pre-checks still yields the domain error."""
        await register(container)

        async with container.uow_factory() as uow:
            with pytest.raises(UsernameAlreadyExistsError):
                await uow.users.add(User(id=uuid4(), username=Username("alice")))
            # The savepoint keeps the transaction usable
            assert await uow.users.exists_by_username(Username("alice"))

            with pytest.raises(EmailAlreadyExistsError):
                await uow.users.add(
                    User(id=uuid4(), username=Username("carol"), email=Email("alice@example.com"))
                )


class TestTokens:
    @pytest.mark.asyncio
    async def test_reissue_supersedes_previous_token(self, container):
        user = (await register(container)).user

        first = await container.token_issuer.issue(user.id, TokenPurpose.RESET_PASSWORD, 3600)
        second = await container.token_issuer.issue(user.id, TokenPurpose.RESET_PASSWORD, 3600)

        with pytest.raises(TokenNotFoundError):
            await container.token_issuer.validate(first.value)
        validation = await container.token_issuer.validate(second.value)
        assert validation.user_id == user.id

    @pytest.mark.asyncio
    async def test_one_active_token_per_purpose(self, container):
        user = (await register(container)).user
        now = container.token_issuer.clock()

        async with container.uow_factory() as uow:
            with pytest.raises(ActiveTokenConflictError):
                await uow.auth_tokens.add(
                    AuthToken(
                        id=uuid4(),
                        user_id=user.id,
                        purpose=TokenPurpose.CONFIRM_EMAIL,
                        token_hash=hash_token("second"),
                        issued_at=now,
                        expires_at=now + timedelta(hours=1),
                    )
                )

    @pytest.mark.asyncio
    async def test_token_consumed_once(self, container):
        user = (await register(container)).user
        issued = await container.token_issuer.issue(user.id, TokenPurpose.RESET_PASSWORD, 3600)

        await container.auth_service.reset_password(issued.value, "N3w!Password")

        with pytest.raises(TokenAlreadyConsumedError):
            await container.auth_service.reset_password(issued.value, "An0ther!Pass")

    @pytest.mark.asyncio
    async def test_purge_expired(self, container):
        user = (await register(container)).user
        await container.token_issuer.issue(user.id, TokenPurpose.RESET_PASSWORD, 0)

        assert await container.token_issuer.purge_expired() >= 1


class TestSocial:
    @pytest.mark.asyncio
    async def test_social_login_creates_then_reuses_account(self, container, recorded_events):
        profile = {"username": "alice", "email": "alice@gmail.com", "email_verified": True}

        first = await container.auth_service.social_login("google", "g-1", profile)
        second = await container.auth_service.social_login("google", "g-1", profile)

        assert first.user_id == second.user_id
        assert recorded_events.count(AuthEvent.BEFORE_SOCIAL_LOGIN_USER_CREATE) == 1
        assert await container.linker.list_for_user(first.user_id) == {"google"}

    @pytest.mark.asyncio
    async def test_social_username_collision(self, container):
        local = (await register(container)).user

        session = await container.auth_service.social_login(
            "github", "42", {"username": "alice"}
        )

        assert session.user_id != local.id
        created = await container.credential_store.get(session.user_id)
        assert created.username.value == "alice_1"

    @pytest.mark.asyncio
    async def test_identity_has_one_owner(self, container):
        alice = (await register(container)).user
        bob = (await register(container, username="bob", email="bob@example.com")).user

        await container.linker.link(alice.id, "google", "g-1")
        with pytest.raises(SocialAccountAlreadyLinkedError):
            await container.linker.link(bob.id, "google", "g-1")
        assert await container.linker.find_by_provider_identity("google", "g-1") == alice.id


class TestCommands:
    @pytest.mark.asyncio
    async def test_add_superuser_twice(self, container):
        first = await users_add_superuser(container.credential_store, container.password_hasher)
        second = await users_add_superuser(container.credential_store, container.password_hasher)

        assert first.exit_code == 0
        assert second.exit_code == 1

        session = await container.auth_service.login(
            LoginInput(username="superadmin", password=first.generated_password)
        )
        claims = container.access_tokens.decode_access_token(session.access_token)
        assert claims["superuser"] is True
        assert claims["role"] == "admin"


class TestDatabase:
    @pytest.mark.asyncio
    async def test_health_check(self, database):
        assert await database.health_check() is True
