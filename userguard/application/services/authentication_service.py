"""
Authentication service.

Orchestrates registration, local and social login, logout, session refresh,
password change and reset, and email confirmation. Lifecycle events are
emitted around the primary writes: "before" events ahead of the transaction,
"after" events once it has committed.
"""

import asyncio
import logging
import re
from datetime import timedelta
from typing import Any
from uuid import UUID, uuid4

from userguard.application.dto.auth_dto import (
    IssuedToken,
    LoginInput,
    RegisterUserInput,
    RegistrationResult,
    UserProfileOutput,
)
from userguard.application.ports.outbound.access_token_port import AccessTokenPort
from userguard.application.ports.outbound.event_dispatcher_port import EventDispatcherPort
from userguard.application.ports.outbound.password_hasher_port import PasswordHasherPort
from userguard.application.ports.outbound.unit_of_work_port import (
    UnitOfWorkFactory,
    UnitOfWorkPort,
)
from userguard.application.services.credential_store import CredentialStore
from userguard.application.services.social_identity_linker import SocialIdentityLinker
from userguard.application.services.token_issuer import TokenIssuer
from userguard.core.clock import Clock, utc_now
from userguard.core.config import Settings
from userguard.core.security import generate_token_value, hash_token, validate_password_strength
from userguard.domain.entities.auth_session import AuthSession, SessionState
from userguard.domain.entities.social_identity import normalize_provider
from userguard.domain.entities.user import User
from userguard.domain.events import AuthEvent, AuthEventPayload
from userguard.domain.exceptions import (
    AccountInactiveError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidSessionStateError,
    InvalidUsernameError,
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
from userguard.domain.value_objects.email import Email
from userguard.domain.value_objects.password_hash import PasswordHash
from userguard.domain.value_objects.role import TokenPurpose
from userguard.domain.value_objects.username import MAX_LENGTH, MIN_LENGTH, Username

logger = logging.getLogger(__name__)

# Verified against when the username is unknown, so failed logins take
# the same time whether or not the account exists.
DUMMY_PASSWORD = "userguard-timing-equalizer"

_USERNAME_INVALID_CHARS = re.compile(r"[^a-z0-9_.-]+")


class AuthenticationService:
    """Service orchestrating authentication flows."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        credential_store: CredentialStore,
        token_issuer: TokenIssuer,
        linker: SocialIdentityLinker,
        password_hasher: PasswordHasherPort,
        access_tokens: AccessTokenPort,
        dispatcher: EventDispatcherPort,
        settings: Settings,
        clock: Clock = utc_now,
    ):
        """
        Initialize authentication service.

        Args:
            uow_factory: Callable returning a fresh unit of work
            credential_store: User persistence
            token_issuer: Single-use tokens (confirmation, reset)
            linker: Social identity links
            password_hasher: Argon2id hasher
            access_tokens: Access token codec
            dispatcher: Lifecycle event sink
            settings: Userguard settings
            clock: Time source
        """
        self.uow_factory = uow_factory
        self.credential_store = credential_store
        self.token_issuer = token_issuer
        self.linker = linker
        self.password_hasher = password_hasher
        self.access_tokens = access_tokens
        self.dispatcher = dispatcher
        self.settings = settings
        self.clock = clock
        self._dummy_hash: str | None = None

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    async def register(self, data: RegisterUserInput) -> RegistrationResult:
        """
        Register a new local account.

        When email validation is required the account starts inactive and a
        confirm_email token is issued in the same transaction.

        Raises:
            RegistrationDisabledError: If registration is turned off
            InvalidUsernameError, InvalidEmailError: On malformed input
            WeakPasswordError: If the password fails the policy
            UsernameAlreadyExistsError, EmailAlreadyExistsError: On duplicates
        """
        if not self.settings.registration_enabled:
            raise RegistrationDisabledError()

        username = Username(data.username)
        email = Email(data.email) if data.email else None
        self._check_password_strength(data.password)

        await self._emit(
            AuthEvent.BEFORE_REGISTER,
            context={"username": username.value, "email": email.value if email else None},
        )

        password_hash = PasswordHash(await self._hash(data.password))
        needs_validation = self.settings.email_validation_required

        user = User(
            id=uuid4(),
            username=username,
            email=email,
            password_hash=password_hash,
            role=self.settings.default_role,
            is_active=not needs_validation,
            email_verified=not needs_validation,
            first_name=data.first_name,
            last_name=data.last_name,
        )

        confirmation: IssuedToken | None = None
        async with self.uow_factory() as uow:
            created = await self.credential_store.create_in(uow, user)
            if needs_validation:
                confirmation = await self.token_issuer.issue_in(
                    uow,
                    created.id,
                    TokenPurpose.CONFIRM_EMAIL,
                    self.settings.confirm_email_token_ttl_seconds,
                )
            await uow.commit()

        logger.info(f"User registered successfully: {created.id} ({created.username})")
        await self._emit(
            AuthEvent.AFTER_REGISTER,
            user_id=created.id,
            context={"username": created.username.value, "email_validation": needs_validation},
        )

        return RegistrationResult(
            user=UserProfileOutput.from_entity(created),
            confirmation_token=confirmation,
        )

    # -------------------------------------------------------------------------
    # Local login
    # -------------------------------------------------------------------------

    async def login(self, credentials: LoginInput) -> AuthSession:
        """
        Authenticate with username and password.

        Returns:
            An authenticated session carrying access and refresh tokens

        Raises:
            InvalidCredentialsError: Unknown username, wrong password or no
                local password, all reported identically
            AccountInactiveError: If the password is right but the account
                is inactive
        """
        async with self.uow_factory() as uow:
            user = await self._get_by_username_or_none(uow, credentials.username)

            if user is None or not user.has_usable_password:
                await self._verify(credentials.password, await self._get_dummy_hash())
                logger.warning(f"Login failed: unknown user or no password {credentials.username!r}")
                raise InvalidCredentialsError()

            if not await self._verify(credentials.password, user.password_hash.value):
                logger.warning(f"Login failed: invalid password for user {user.id}")
                raise InvalidCredentialsError()

            if not user.is_active:
                logger.warning(f"Login failed: account inactive {user.id}")
                raise AccountInactiveError(str(user.id))

            if self.password_hasher.needs_rehash(user.password_hash.value):
                user.change_password(PasswordHash(await self._hash(credentials.password)))
                logger.info(f"Password rehashed with current parameters for user {user.id}")

            session, access_token, refresh_token = await self._open_session_in(uow, user)
            await uow.commit()

        session.complete_authentication(access_token, refresh_token)
        logger.info(f"User logged in successfully: {user.id} ({user.username})")
        await self._emit(
            AuthEvent.AFTER_LOGIN,
            user_id=user.id,
            context={"session_id": str(session.id), "provider": None},
        )
        return session

    # -------------------------------------------------------------------------
    # Social login
    # -------------------------------------------------------------------------

    async def social_login(
        self,
        provider: str,
        external_id: str,
        profile: dict[str, Any] | None = None,
    ) -> AuthSession:
        """
        Log in through an external provider, creating the account if needed.

        Resolution order:
        1. an existing link for (provider, external_id)
        2. an active account whose email matches a provider-verified email,
           which gets linked
        3. a new account created from the profile and linked in the same
           transaction (before_social_login_user_create is emitted first)

        Raises:
            SocialLoginDisabledError: If social login is off or the provider
                is not configured for login
            AccountInactiveError: If the linked account is inactive
            UsernameAlreadyExistsError: If the username derived from the
                profile is taken and the collision policy is "fail"
        """
        provider = normalize_provider(provider)
        if not self.settings.social_login_enabled:
            raise SocialLoginDisabledError()
        if provider not in self.settings.login_providers:
            raise SocialLoginDisabledError(provider)

        profile = dict(profile or {})
        external_id = str(external_id).strip()

        async with self.uow_factory() as uow:
            identity = await self.linker.find_in(uow, provider, external_id)
            known = identity is not None

        if not known:
            await self._emit(
                AuthEvent.BEFORE_SOCIAL_LOGIN_USER_CREATE,
                context={"provider": provider, "external_id": external_id, "profile": profile},
            )

        created = False
        async with self.uow_factory() as uow:
            # Re-resolve: a concurrent login may have linked the identity meanwhile
            identity = await self.linker.find_in(uow, provider, external_id)
            if identity is not None:
                user = await self.credential_store.get_in(uow, identity.user_id)
            else:
                user = await self._find_by_verified_email_in(uow, profile)
                if user is None:
                    user = await self._create_social_user_in(uow, provider, external_id, profile)
                    created = True
                await self.linker.link_in(uow, user.id, provider, external_id, profile)

            if not user.is_active:
                logger.warning(f"Social login failed: account inactive {user.id}")
                raise AccountInactiveError(str(user.id))

            session, access_token, refresh_token = await self._open_session_in(
                uow, user, provider=provider
            )
            await uow.commit()

        session.complete_authentication(access_token, refresh_token)
        logger.info(f"User logged in with {provider}: {user.id} (created={created})")
        await self._emit(
            AuthEvent.AFTER_LOGIN,
            user_id=user.id,
            context={"session_id": str(session.id), "provider": provider, "created": created},
        )
        return session

    async def _find_by_verified_email_in(
        self, uow: UnitOfWorkPort, profile: dict[str, Any]
    ) -> User | None:
        if profile.get("email_verified") is not True or not profile.get("email"):
            return None
        try:
            email = Email(profile["email"])
        except InvalidEmailError:
            return None
        return await uow.users.get_by_email(email)

    async def _create_social_user_in(
        self,
        uow: UnitOfWorkPort,
        provider: str,
        external_id: str,
        profile: dict[str, Any],
    ) -> User:
        email = None
        if profile.get("email"):
            try:
                email = Email(profile["email"])
            except InvalidEmailError:
                logger.warning(f"Ignoring malformed email from {provider} profile")
            else:
                if await uow.users.exists_by_email(email):
                    # Unverified address already owned by another account
                    email = None

        base = Username(social_username_base(provider, external_id, profile))
        candidates = [base]
        if self.settings.social_username_policy == "suffix":
            candidates += [
                base.with_suffix(n) for n in range(1, self.settings.social_username_max_suffix + 1)
            ]

        for username in candidates:
            user = User(
                id=uuid4(),
                username=username,
                email=email,
                role=self.settings.default_role,
                is_active=True,
                email_verified=email is not None and profile.get("email_verified") is True,
                first_name=_profile_value(profile, "first_name", "given_name"),
                last_name=_profile_value(profile, "last_name", "family_name"),
            )
            try:
                return await self.credential_store.create_in(uow, user)
            except UsernameAlreadyExistsError:
                logger.info(f"Social login username {username} taken")
                continue

        raise UsernameAlreadyExistsError(base.value)

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def logout(self, session: AuthSession) -> None:
        """
        End an authenticated session.

        Raises:
            InvalidSessionStateError: If the session is not authenticated
        """
        if session.state != SessionState.AUTHENTICATED:
            raise InvalidSessionStateError(session.state.value, "log out")

        context = {"session_id": str(session.id)}
        await self._emit(AuthEvent.BEFORE_LOGOUT, user_id=session.user_id, context=context)

        now = self.clock()
        async with self.uow_factory() as uow:
            await uow.sessions.revoke(session.id, now)
            await uow.commit()

        session.log_out(now)
        logger.info(f"User logged out: {session.user_id}")
        await self._emit(AuthEvent.AFTER_LOGOUT, user_id=session.user_id, context=context)

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        """
        Rotate a refresh token and issue a new access token.

        Reusing a refresh token that was already rotated is treated as
        theft: every session in the family is revoked.

        Raises:
            SessionNotFoundError: If the token matches no session
            SessionRevokedError: If the token was already used or revoked
            SessionExpiredError: If the session expired
            AccountInactiveError: If the user is gone or inactive
        """
        now = self.clock()
        async with self.uow_factory() as uow:
            current = await uow.sessions.get_by_refresh_token_hash(hash_token(refresh_token or ""))
            if current is None:
                logger.warning("Token refresh failed: session not found")
                raise SessionNotFoundError()

            if current.is_revoked:
                revoked = await uow.sessions.revoke_family(current.family_id, now)
                await uow.commit()
                logger.error(
                    f"Refresh token reuse detected for user {current.user_id}, "
                    f"revoked {revoked} session(s) in family {current.family_id}"
                )
                raise SessionRevokedError(current.family_id)

            if current.is_expired(now):
                logger.warning(f"Token refresh failed: session {current.id} expired")
                raise SessionExpiredError()

            user = await uow.users.get_by_id(current.user_id)
            if user is None or not user.is_active:
                logger.warning(f"Token refresh failed: user {current.user_id} unavailable")
                raise AccountInactiveError(str(current.user_id))

            if not await uow.sessions.revoke(current.id, now):
                # A concurrent refresh rotated this token first
                revoked = await uow.sessions.revoke_family(current.family_id, now)
                await uow.commit()
                logger.error(
                    f"Concurrent refresh of session {current.id} for user {current.user_id}, "
                    f"revoked {revoked} session(s) in family {current.family_id}"
                )
                raise SessionRevokedError(current.family_id)

            session, access_token, refresh_token = await self._open_session_in(
                uow, user, provider=current.provider, family_id=current.family_id
            )
            await uow.commit()

        session.complete_authentication(access_token, refresh_token)
        logger.info(f"Session refreshed for user {user.id}")
        return session

    async def _open_session_in(
        self,
        uow: UnitOfWorkPort,
        user: User,
        provider: str | None = None,
        family_id: UUID | None = None,
    ) -> tuple[AuthSession, str, str]:
        """Record the login and persist a new session. Returns the session and its tokens."""
        now = self.clock()
        user.record_login(now)
        await uow.users.update(user)

        refresh_token = generate_token_value()
        session = AuthSession.open(
            id=uuid4(),
            user_id=user.id,
            family_id=family_id or uuid4(),
            refresh_token_hash=hash_token(refresh_token),
            issued_at=now,
            expires_at=now + timedelta(days=self.settings.refresh_token_expire_days),
            provider=provider,
        )
        await uow.sessions.add(session)
        access_token = self.access_tokens.create_access_token(user, session.id)
        return session, access_token, refresh_token

    # -------------------------------------------------------------------------
    # Passwords
    # -------------------------------------------------------------------------

    async def change_password(
        self,
        user_id: UUID,
        new_password: str,
        current_password: str | None = None,
    ) -> None:
        """
        Set a new password and revoke the user's sessions.

        Args:
            user_id: Account to change
            new_password: New plaintext password
            current_password: When given, must match the stored password

        Raises:
            UserNotFoundError: If no such user exists
            InvalidCredentialsError: If current_password does not match
            WeakPasswordError: If the new password fails the policy
        """
        self._check_password_strength(new_password)

        async with self.uow_factory() as uow:
            user = await self.credential_store.get_in(uow, user_id)

            if current_password is not None:
                if not user.has_usable_password or not await self._verify(
                    current_password, user.password_hash.value
                ):
                    logger.warning(f"Password change failed: invalid current password {user_id}")
                    raise InvalidCredentialsError()

            revoked = await self._set_password_in(uow, user, new_password)
            await uow.commit()

        logger.info(f"Password changed for user {user_id}, revoked {revoked} session(s)")
        await self._emit(
            AuthEvent.AFTER_CHANGE_PASSWORD,
            user_id=user_id,
            context={"reason": "change", "revoked_sessions": revoked},
        )

    async def request_password_reset(self, username: str) -> IssuedToken:
        """
        Issue a reset_password token for a user.

        The token is returned for the host to deliver. Any earlier
        unconsumed reset token stops working.

        Raises:
            UserNotFoundError: If no such user exists
            AccountInactiveError: If the account is inactive
        """
        async with self.uow_factory() as uow:
            user = await self.credential_store.find_by_username_in(uow, username)
            if not user.is_active:
                raise AccountInactiveError(str(user.id))
            issued = await self.token_issuer.issue_in(
                uow,
                user.id,
                TokenPurpose.RESET_PASSWORD,
                self.settings.reset_password_token_ttl_seconds,
            )
            await uow.commit()

        logger.info(f"Password reset requested for user {user.id}")
        return issued

    async def reset_password(self, token: str, new_password: str) -> None:
        """
        Redeem a reset_password token and set a new password.

        Raises:
            WeakPasswordError: If the new password fails the policy
            TokenNotFoundError, TokenAlreadyConsumedError, TokenExpiredError:
                On an unusable token
        """
        self._check_password_strength(new_password)

        try:
            async with self.uow_factory() as uow:
                consumed = await self.token_issuer.consume_in(
                    uow, token, TokenPurpose.RESET_PASSWORD
                )
                user = await self.credential_store.get_in(uow, consumed.user_id)
                revoked = await self._set_password_in(uow, user, new_password)
                await uow.commit()
        except TokenExpiredError as exc:
            await self.token_issuer.notify_expired(exc)
            raise

        logger.info(f"Password reset for user {user.id}, revoked {revoked} session(s)")
        await self._emit(
            AuthEvent.AFTER_CHANGE_PASSWORD,
            user_id=user.id,
            context={"reason": "reset", "revoked_sessions": revoked},
        )

    async def _set_password_in(self, uow: UnitOfWorkPort, user: User, new_password: str) -> int:
        user.change_password(PasswordHash(await self._hash(new_password)))
        await uow.users.update(user)
        return await uow.sessions.revoke_all_for_user(user.id, self.clock())

    # -------------------------------------------------------------------------
    # Email confirmation
    # -------------------------------------------------------------------------

    async def confirm_email(self, token: str) -> UserProfileOutput:
        """
        Redeem a confirm_email token, verifying the email.

        An account created inactive pending verification is activated.

        Raises:
            TokenNotFoundError, TokenAlreadyConsumedError, TokenExpiredError:
                On an unusable token
        """
        try:
            async with self.uow_factory() as uow:
                consumed = await self.token_issuer.consume_in(
                    uow, token, TokenPurpose.CONFIRM_EMAIL
                )
                user = await self.credential_store.get_in(uow, consumed.user_id)
                # A deactivated account that was already verified stays inactive
                if not user.email_verified and not user.is_active:
                    user.activate()
                user.verify_email()
                user = await uow.users.update(user)
                await uow.commit()
        except TokenExpiredError as exc:
            await self.token_issuer.notify_expired(exc)
            raise

        logger.info(f"Email confirmed for user {user.id}")
        return UserProfileOutput.from_entity(user)

    async def resend_token_validation(self, username: str) -> IssuedToken:
        """
        Issue a fresh confirm_email token for an account awaiting validation.

        Raises:
            UserNotFoundError: If no such user exists
            InvalidUserStateTransitionError: If the email is already verified
        """
        async with self.uow_factory() as uow:
            user = await self.credential_store.find_by_username_in(uow, username)
            if user.email_verified:
                raise InvalidUserStateTransitionError("verified", "resend validation for")
            issued = await self.token_issuer.issue_in(
                uow,
                user.id,
                TokenPurpose.CONFIRM_EMAIL,
                self.settings.confirm_email_token_ttl_seconds,
            )
            await uow.commit()

        logger.info(f"Validation token resent for user {user.id}")
        await self._emit(
            AuthEvent.AFTER_RESEND_TOKEN_VALIDATION,
            user_id=user.id,
            context={"expires_at": issued.expires_at.isoformat()},
        )
        return issued

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_password_strength(self, password: str) -> None:
        is_valid, reason = validate_password_strength(password, self.settings)
        if not is_valid:
            raise WeakPasswordError(reason)

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(self.password_hasher.hash, password)

    async def _verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.password_hasher.verify, password, password_hash)

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await self._hash(DUMMY_PASSWORD)
        return self._dummy_hash

    async def _get_by_username_or_none(self, uow: UnitOfWorkPort, username: str) -> User | None:
        try:
            return await self.credential_store.find_by_username_in(uow, username)
        except UserNotFoundError:
            return None

    async def _emit(
        self,
        event: AuthEvent,
        user_id: UUID | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        await self.dispatcher.emit(
            AuthEventPayload(event=event, user_id=user_id, context=context or {})
        )


def social_username_base(provider: str, external_id: str, profile: dict[str, Any]) -> str:
    """
    Derive a valid username from a provider profile.

    Tries the profile's username, then the email local part, then falls
    back to ``<provider>_<external_id>``.
    """
    email = profile.get("email") or ""
    for raw in (profile.get("username"), email.split("@")[0] if "@" in email else None):
        candidate = _sanitize_username(raw)
        if candidate:
            return candidate
    return _sanitize_username(f"{provider}_{external_id}") or "social_user"


def _sanitize_username(raw: Any) -> str | None:
    if not raw:
        return None
    cleaned = _USERNAME_INVALID_CHARS.sub("_", str(raw).strip().lower()).strip("_.-")
    cleaned = cleaned[:MAX_LENGTH]
    if len(cleaned) < MIN_LENGTH:
        return None
    try:
        return Username(cleaned).value
    except InvalidUsernameError:
        return None


def _profile_value(profile: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = profile.get(key)
        if value:
            return str(value)[:100]
    return None
