"""
Unit tests for AuthenticationService.

All tests are fully mocked - no database or external dependencies.
"""

from datetime import timedelta
from unittest.mock import Mock
from uuid import uuid4

import pytest
from factories import build_auth_service, emitted_events, fake_hash, make_settings

from userguard.application.dto.auth_dto import LoginInput, RegisterUserInput
from userguard.application.services.authentication_service import social_username_base
from userguard.core.security import hash_token
from userguard.domain.entities.auth_session import AuthSession, SessionState
from userguard.domain.entities.auth_token import AuthToken
from userguard.domain.entities.social_identity import SocialIdentity
from userguard.domain.events import AuthEvent
from userguard.domain.exceptions import (
    AccountInactiveError,
    InvalidCredentialsError,
    InvalidSessionStateError,
    InvalidUserStateTransitionError,
    RegistrationDisabledError,
    SessionExpiredError,
    SessionNotFoundError,
    SessionRevokedError,
    SocialLoginDisabledError,
    TokenExpiredError,
    UsernameAlreadyExistsError,
    UserNotFoundError,
    WeakPasswordError,
)
from userguard.domain.value_objects.role import TokenPurpose

STRONG_PASSWORD = "Str0ng!Pass"


@pytest.fixture
def register_input():
    """Create sample registration input."""
    return RegisterUserInput(
        username="NewUser",
        password="N3w!Password",
        email="newuser@example.com",
        first_name="New",
    )


def make_service(mock_uow, dispatcher, password_hasher, access_tokens, clock, **overrides):
    return build_auth_service(
        make_settings(**overrides),
        lambda: mock_uow,
        dispatcher,
        password_hasher,
        access_tokens,
        clock,
    )


def persisted_session(user_id, clock, **overrides):
    values = {
        "id": uuid4(),
        "user_id": user_id,
        "family_id": uuid4(),
        "refresh_token_hash": hash_token("refresh-value"),
        "issued_at": clock(),
        "expires_at": clock() + timedelta(days=7),
    }
    values.update(overrides)
    return AuthSession(**values)


class TestRegister:
    """Test the register method."""

    @pytest.mark.asyncio
    async def test_register_requires_email_validation(
        self, auth_service, mock_uow, dispatcher, register_input
    ):
        mock_uow.users.exists_by_username.return_value = False
        mock_uow.users.exists_by_email.return_value = False

        result = await auth_service.register(register_input)

        assert result.user.username == "newuser"
        assert result.user.is_active is False
        assert result.user.email_verified is False
        assert result.confirmation_token is not None
        assert result.confirmation_token.purpose == TokenPurpose.CONFIRM_EMAIL

        created = mock_uow.users.add.await_args.args[0]
        assert created.password_hash.value == fake_hash("N3w!Password")
        mock_uow.auth_tokens.add.assert_awaited_once()
        mock_uow.commit.assert_awaited_once()
        assert emitted_events(dispatcher) == [AuthEvent.BEFORE_REGISTER, AuthEvent.AFTER_REGISTER]

    @pytest.mark.asyncio
    async def test_register_without_email_validation(
        self, mock_uow, dispatcher, password_hasher, access_tokens, clock, register_input
    ):
        service = make_service(
            mock_uow, dispatcher, password_hasher, access_tokens, clock,
            email_validation_required=False,
        )
        mock_uow.users.exists_by_username.return_value = False
        mock_uow.users.exists_by_email.return_value = False

        result = await service.register(register_input)

        assert result.user.is_active is True
        assert result.confirmation_token is None
        mock_uow.auth_tokens.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_disabled(
        self, mock_uow, dispatcher, password_hasher, access_tokens, clock, register_input
    ):
        service = make_service(
            mock_uow, dispatcher, password_hasher, access_tokens, clock,
            registration_enabled=False,
        )

        with pytest.raises(RegistrationDisabledError):
            await service.register(register_input)

        dispatcher.emit.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_weak_password(self, auth_service, mock_uow, dispatcher):
        with pytest.raises(WeakPasswordError):
            await auth_service.register(RegisterUserInput(username="newuser", password="weak"))

        mock_uow.users.add.assert_not_called()
        dispatcher.emit.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_duplicate_username(
        self, auth_service, mock_uow, dispatcher, register_input
    ):
        mock_uow.users.exists_by_username.return_value = True

        with pytest.raises(UsernameAlreadyExistsError):
            await auth_service.register(register_input)

        mock_uow.commit.assert_not_called()
        assert emitted_events(dispatcher) == [AuthEvent.BEFORE_REGISTER]


class TestLogin:
    """Test the login method."""

    @pytest.mark.asyncio
    async def test_login_success(
        self, auth_service, mock_uow, dispatcher, access_tokens, sample_user, clock
    ):
        mock_uow.users.get_by_username.return_value = sample_user

        session = await auth_service.login(LoginInput(username="Alice", password=STRONG_PASSWORD))

        assert session.state == SessionState.AUTHENTICATED
        assert session.access_token == "access-token"
        assert session.refresh_token
        assert session.refresh_token_hash == hash_token(session.refresh_token)
        assert session.user_id == sample_user.id
        assert sample_user.last_login_at == clock()
        access_tokens.create_access_token.assert_called_once_with(sample_user, session.id)
        mock_uow.sessions.add.assert_awaited_once()
        mock_uow.commit.assert_awaited_once()
        assert emitted_events(dispatcher) == [AuthEvent.AFTER_LOGIN]

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, auth_service, mock_uow, password_hasher):
        mock_uow.users.get_by_username.return_value = None

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(LoginInput(username="ghost", password=STRONG_PASSWORD))

        # A dummy verification keeps timing uniform
        password_hasher.verify.assert_called_once()

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, auth_service, mock_uow, sample_user):
        mock_uow.users.get_by_username.return_value = sample_user

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(LoginInput(username="alice", password="Wr0ng!Pass"))

        mock_uow.sessions.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_without_local_password(self, auth_service, mock_uow, sample_user):
        sample_user.password_hash = None
        mock_uow.users.get_by_username.return_value = sample_user

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(LoginInput(username="alice", password=STRONG_PASSWORD))

    @pytest.mark.asyncio
    async def test_login_inactive_account(self, auth_service, mock_uow, sample_user, dispatcher):
        sample_user.is_active = False
        mock_uow.users.get_by_username.return_value = sample_user

        with pytest.raises(AccountInactiveError):
            await auth_service.login(LoginInput(username="alice", password=STRONG_PASSWORD))

        dispatcher.emit.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_rehashes_outdated_digest(
        self, auth_service, mock_uow, password_hasher, sample_user
    ):
        mock_uow.users.get_by_username.return_value = sample_user
        password_hasher.needs_rehash.return_value = True

        await auth_service.login(LoginInput(username="alice", password=STRONG_PASSWORD))

        password_hasher.hash.assert_called_with(STRONG_PASSWORD)
        mock_uow.users.update.assert_awaited()


class TestSocialLogin:
    """Test the social_login method."""

    @pytest.mark.asyncio
    async def test_disabled(self, auth_service):
        with pytest.raises(SocialLoginDisabledError):
            await auth_service.social_login("google", "g-123")

    @pytest.mark.asyncio
    async def test_provider_not_configured(self, social_auth_service):
        with pytest.raises(SocialLoginDisabledError):
            await social_auth_service.social_login("twitter", "t-1")

    @pytest.mark.asyncio
    async def test_existing_link(self, social_auth_service, mock_uow, dispatcher, sample_user):
        mock_uow.social_identities.get_by_provider_identity.return_value = SocialIdentity(
            id=uuid4(), user_id=sample_user.id, provider="google", external_id="g-123"
        )
        mock_uow.users.get_by_id.return_value = sample_user

        session = await social_auth_service.social_login("Google", "g-123")

        assert session.user_id == sample_user.id
        assert session.provider == "google"
        mock_uow.users.add.assert_not_called()
        mock_uow.social_identities.add.assert_not_called()
        assert emitted_events(dispatcher) == [AuthEvent.AFTER_LOGIN]
        assert dispatcher.emit.await_args.args[0].context["created"] is False

    @pytest.mark.asyncio
    async def test_creates_and_links_new_user(self, social_auth_service, mock_uow, dispatcher):
        mock_uow.social_identities.get_by_provider_identity.return_value = None
        mock_uow.social_identities.get_by_user_and_provider.return_value = None
        mock_uow.users.exists_by_username.return_value = False
        mock_uow.users.exists_by_email.return_value = False
        mock_uow.users.get_by_id.return_value = Mock()
        profile = {
            "username": "Alice.W",
            "email": "alice@gmail.com",
            "email_verified": False,
            "given_name": "Alice",
        }

        session = await social_auth_service.social_login("google", "g-123", profile)

        created = mock_uow.users.add.await_args.args[0]
        assert created.username.value == "alice.w"
        assert created.password_hash is None
        assert created.is_active is True
        assert created.email_verified is False
        assert created.first_name == "Alice"
        linked = mock_uow.social_identities.add.await_args.args[0]
        assert (linked.user_id, linked.provider, linked.external_id) == (
            created.id, "google", "g-123"
        )
        assert session.user_id == created.id
        mock_uow.commit.assert_awaited_once()
        assert emitted_events(dispatcher) == [
            AuthEvent.BEFORE_SOCIAL_LOGIN_USER_CREATE,
            AuthEvent.AFTER_LOGIN,
        ]
        assert dispatcher.emit.await_args.args[0].context["created"] is True

    @pytest.mark.asyncio
    async def test_username_collision_gets_suffix(self, social_auth_service, mock_uow):
        mock_uow.social_identities.get_by_provider_identity.return_value = None
        mock_uow.social_identities.get_by_user_and_provider.return_value = None
        mock_uow.users.exists_by_username.side_effect = [True, True, False]
        mock_uow.users.get_by_id.return_value = Mock()

        await social_auth_service.social_login("github", "42", {"username": "alice"})

        assert mock_uow.users.add.await_args.args[0].username.value == "alice_2"

    @pytest.mark.asyncio
    async def test_username_collision_fail_policy(
        self, mock_uow, dispatcher, password_hasher, access_tokens, clock, social_settings
    ):
        settings = social_settings.model_copy(update={"social_username_policy": "fail"})
        service = build_auth_service(
            settings, lambda: mock_uow, dispatcher, password_hasher, access_tokens, clock
        )
        mock_uow.social_identities.get_by_provider_identity.return_value = None
        mock_uow.users.exists_by_username.return_value = True

        with pytest.raises(UsernameAlreadyExistsError):
            await service.social_login("github", "42", {"username": "alice"})

        mock_uow.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_links_existing_user_by_verified_email(
        self, social_auth_service, mock_uow, sample_user
    ):
        mock_uow.social_identities.get_by_provider_identity.return_value = None
        mock_uow.social_identities.get_by_user_and_provider.return_value = None
        mock_uow.users.get_by_email.return_value = sample_user
        mock_uow.users.get_by_id.return_value = sample_user

        session = await social_auth_service.social_login(
            "google", "g-123", {"email": "alice@example.com", "email_verified": True}
        )

        assert session.user_id == sample_user.id
        mock_uow.users.add.assert_not_called()
        assert mock_uow.social_identities.add.await_args.args[0].user_id == sample_user.id

    @pytest.mark.asyncio
    async def test_linked_user_inactive(self, social_auth_service, mock_uow, sample_user):
        sample_user.is_active = False
        mock_uow.social_identities.get_by_provider_identity.return_value = SocialIdentity(
            id=uuid4(), user_id=sample_user.id, provider="google", external_id="g-123"
        )
        mock_uow.users.get_by_id.return_value = sample_user

        with pytest.raises(AccountInactiveError):
            await social_auth_service.social_login("google", "g-123")

        mock_uow.sessions.add.assert_not_called()


class TestLogout:
    """Test the logout method."""

    @pytest.mark.asyncio
    async def test_logout(self, auth_service, mock_uow, dispatcher, sample_user, clock):
        session = AuthSession.open(
            id=uuid4(),
            user_id=sample_user.id,
            family_id=uuid4(),
            refresh_token_hash="c" * 64,
            issued_at=clock(),
            expires_at=clock() + timedelta(days=7),
        )
        session.complete_authentication("access", "refresh")

        await auth_service.logout(session)

        assert session.state == SessionState.LOGGED_OUT
        mock_uow.sessions.revoke.assert_awaited_once_with(session.id, clock())
        assert emitted_events(dispatcher) == [AuthEvent.BEFORE_LOGOUT, AuthEvent.AFTER_LOGOUT]

    @pytest.mark.asyncio
    async def test_logout_requires_authenticated_session(self, auth_service, clock):
        session = persisted_session(uuid4(), clock)

        with pytest.raises(InvalidSessionStateError):
            await auth_service.logout(session)


class TestRefreshSession:
    """Test the refresh_session method."""

    @pytest.mark.asyncio
    async def test_refresh_rotates_within_family(
        self, auth_service, mock_uow, sample_user, clock
    ):
        current = persisted_session(sample_user.id, clock, provider="google")
        mock_uow.sessions.get_by_refresh_token_hash.return_value = current
        mock_uow.users.get_by_id.return_value = sample_user

        session = await auth_service.refresh_session("refresh-value")

        mock_uow.sessions.get_by_refresh_token_hash.assert_awaited_once_with(
            hash_token("refresh-value")
        )
        mock_uow.sessions.revoke.assert_awaited_once_with(current.id, clock())
        assert session.id != current.id
        assert session.family_id == current.family_id
        assert session.provider == "google"
        assert session.refresh_token != "refresh-value"
        assert session.state == SessionState.AUTHENTICATED

    @pytest.mark.asyncio
    async def test_unknown_refresh_token(self, auth_service, mock_uow):
        mock_uow.sessions.get_by_refresh_token_hash.return_value = None

        with pytest.raises(SessionNotFoundError):
            await auth_service.refresh_session("nope")

    @pytest.mark.asyncio
    async def test_reuse_revokes_family(self, auth_service, mock_uow, clock):
        current = persisted_session(uuid4(), clock, revoked_at=clock())
        mock_uow.sessions.get_by_refresh_token_hash.return_value = current
        mock_uow.sessions.revoke_family.return_value = 3

        with pytest.raises(SessionRevokedError):
            await auth_service.refresh_session("refresh-value")

        mock_uow.sessions.revoke_family.assert_awaited_once_with(current.family_id, clock())
        mock_uow.commit.assert_awaited_once()
        mock_uow.sessions.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_rotation_revokes_family(
        self, auth_service, mock_uow, sample_user, clock
    ):
        current = persisted_session(sample_user.id, clock)
        mock_uow.sessions.get_by_refresh_token_hash.return_value = current
        mock_uow.users.get_by_id.return_value = sample_user
        # Another refresh of the same token revoked it first
        mock_uow.sessions.revoke.return_value = False
        mock_uow.sessions.revoke_family.return_value = 2

        with pytest.raises(SessionRevokedError):
            await auth_service.refresh_session("refresh-value")

        mock_uow.sessions.revoke_family.assert_awaited_once_with(current.family_id, clock())
        mock_uow.sessions.add.assert_not_called()
        mock_uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_expired_session(self, auth_service, mock_uow, clock):
        mock_uow.sessions.get_by_refresh_token_hash.return_value = persisted_session(
            uuid4(), clock
        )
        clock.advance(days=8)

        with pytest.raises(SessionExpiredError):
            await auth_service.refresh_session("refresh-value")

    @pytest.mark.asyncio
    async def test_inactive_user(self, auth_service, mock_uow, sample_user, clock):
        sample_user.is_active = False
        mock_uow.sessions.get_by_refresh_token_hash.return_value = persisted_session(
            sample_user.id, clock
        )
        mock_uow.users.get_by_id.return_value = sample_user

        with pytest.raises(AccountInactiveError):
            await auth_service.refresh_session("refresh-value")


class TestPasswords:
    """Test password change and reset."""

    @pytest.mark.asyncio
    async def test_change_password(self, auth_service, mock_uow, dispatcher, sample_user):
        mock_uow.users.get_by_id.return_value = sample_user
        mock_uow.sessions.revoke_all_for_user.return_value = 2

        await auth_service.change_password(sample_user.id, "N3w!Password", STRONG_PASSWORD)

        assert sample_user.password_hash.value == fake_hash("N3w!Password")
        mock_uow.sessions.revoke_all_for_user.assert_awaited_once()
        payload = dispatcher.emit.await_args.args[0]
        assert payload.event == AuthEvent.AFTER_CHANGE_PASSWORD
        assert payload.context == {"reason": "change", "revoked_sessions": 2}

    @pytest.mark.asyncio
    async def test_change_password_wrong_current(self, auth_service, mock_uow, sample_user):
        mock_uow.users.get_by_id.return_value = sample_user

        with pytest.raises(InvalidCredentialsError):
            await auth_service.change_password(sample_user.id, "N3w!Password", "Wr0ng!Pass")

        mock_uow.users.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_change_password_weak(self, auth_service, mock_uow, sample_user):
        with pytest.raises(WeakPasswordError):
            await auth_service.change_password(sample_user.id, "short")

        mock_uow.users.get_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_request_password_reset(self, auth_service, mock_uow, sample_user):
        mock_uow.users.get_by_username.return_value = sample_user

        issued = await auth_service.request_password_reset("alice")

        assert issued.purpose == TokenPurpose.RESET_PASSWORD
        assert issued.user_id == sample_user.id
        mock_uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_request_password_reset_unknown_user(self, auth_service, mock_uow):
        mock_uow.users.get_by_username.return_value = None

        with pytest.raises(UserNotFoundError):
            await auth_service.request_password_reset("ghost")

    @pytest.mark.asyncio
    async def test_request_password_reset_inactive(self, auth_service, mock_uow, sample_user):
        sample_user.is_active = False
        mock_uow.users.get_by_username.return_value = sample_user

        with pytest.raises(AccountInactiveError):
            await auth_service.request_password_reset("alice")

        mock_uow.auth_tokens.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_reset_password(self, auth_service, mock_uow, dispatcher, sample_user, clock):
        mock_uow.auth_tokens.get_by_token_hash.return_value = AuthToken(
            id=uuid4(),
            user_id=sample_user.id,
            purpose=TokenPurpose.RESET_PASSWORD,
            token_hash=hash_token("reset-value"),
            issued_at=clock(),
            expires_at=clock() + timedelta(hours=1),
        )
        mock_uow.auth_tokens.mark_consumed.return_value = True
        mock_uow.users.get_by_id.return_value = sample_user

        await auth_service.reset_password("reset-value", "N3w!Password")

        assert sample_user.password_hash.value == fake_hash("N3w!Password")
        mock_uow.sessions.revoke_all_for_user.assert_awaited_once()
        assert dispatcher.emit.await_args.args[0].context["reason"] == "reset"

    @pytest.mark.asyncio
    async def test_reset_password_expired_token(
        self, auth_service, mock_uow, dispatcher, sample_user, clock
    ):
        mock_uow.auth_tokens.get_by_token_hash.return_value = AuthToken(
            id=uuid4(),
            user_id=sample_user.id,
            purpose=TokenPurpose.RESET_PASSWORD,
            token_hash=hash_token("reset-value"),
            issued_at=clock() - timedelta(hours=2),
            expires_at=clock() - timedelta(hours=1),
        )

        with pytest.raises(TokenExpiredError):
            await auth_service.reset_password("reset-value", "N3w!Password")

        assert emitted_events(dispatcher) == [AuthEvent.ON_EXPIRED_TOKEN]
        mock_uow.users.update.assert_not_called()


class TestEmailConfirmation:
    """Test email confirmation and resend."""

    @pytest.mark.asyncio
    async def test_confirm_email_activates_account(
        self, auth_service, mock_uow, sample_user, clock
    ):
        sample_user.is_active = False
        sample_user.email_verified = False
        mock_uow.auth_tokens.get_by_token_hash.return_value = AuthToken(
            id=uuid4(),
            user_id=sample_user.id,
            purpose=TokenPurpose.CONFIRM_EMAIL,
            token_hash=hash_token("confirm-value"),
            issued_at=clock(),
            expires_at=clock() + timedelta(days=1),
        )
        mock_uow.auth_tokens.mark_consumed.return_value = True
        mock_uow.users.get_by_id.return_value = sample_user

        profile = await auth_service.confirm_email("confirm-value")

        assert profile.is_active is True
        assert profile.email_verified is True
        mock_uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_resend_token_validation(self, auth_service, mock_uow, dispatcher, sample_user):
        sample_user.is_active = False
        sample_user.email_verified = False
        mock_uow.users.get_by_username.return_value = sample_user
        mock_uow.auth_tokens.delete_active_for_user.return_value = 1

        issued = await auth_service.resend_token_validation("alice")

        assert issued.purpose == TokenPurpose.CONFIRM_EMAIL
        assert emitted_events(dispatcher) == [AuthEvent.AFTER_RESEND_TOKEN_VALIDATION]

    @pytest.mark.asyncio
    async def test_resend_for_verified_account_refused(
        self, auth_service, mock_uow, sample_user
    ):
        mock_uow.users.get_by_username.return_value = sample_user

        with pytest.raises(InvalidUserStateTransitionError):
            await auth_service.resend_token_validation("alice")

        mock_uow.auth_tokens.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_resend_for_deactivated_account_refused(
        self, auth_service, mock_uow, sample_user
    ):
        sample_user.deactivate()
        mock_uow.users.get_by_username.return_value = sample_user

        with pytest.raises(InvalidUserStateTransitionError):
            await auth_service.resend_token_validation("alice")

        mock_uow.auth_tokens.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_confirm_email_keeps_deactivated_account_inactive(
        self, auth_service, mock_uow, sample_user, clock
    ):
        sample_user.deactivate()
        mock_uow.auth_tokens.get_by_token_hash.return_value = AuthToken(
            id=uuid4(),
            user_id=sample_user.id,
            purpose=TokenPurpose.CONFIRM_EMAIL,
            token_hash=hash_token("confirm-value"),
            issued_at=clock(),
            expires_at=clock() + timedelta(days=1),
        )
        mock_uow.auth_tokens.mark_consumed.return_value = True
        mock_uow.users.get_by_id.return_value = sample_user

        profile = await auth_service.confirm_email("confirm-value")

        assert profile.is_active is False
        assert profile.email_verified is True


class TestSocialUsernameBase:
    @pytest.mark.parametrize(
        "profile,expected",
        [
            ({"username": "Jane Doe"}, "jane_doe"),
            ({"email": "jane.doe@example.com"}, "jane.doe"),
            ({"username": "!!", "email": "jd@example.com"}, "google_123"),
            ({}, "google_123"),
        ],
    )
    def test_derivation(self, profile, expected):
        assert social_username_base("google", "123", profile) == expected
