"""
Token issuer service.

Issues, validates and consumes single-use tokens for password reset and
email confirmation. Expiry is detected lazily on validation; purge_expired()
is a storage hygiene sweep only.
"""

import logging
from datetime import timedelta
from uuid import UUID, uuid4

from userguard.application.dto.auth_dto import IssuedToken, TokenValidation
from userguard.application.exceptions import ValidationError
from userguard.application.ports.outbound.event_dispatcher_port import EventDispatcherPort
from userguard.application.ports.outbound.unit_of_work_port import (
    UnitOfWorkFactory,
    UnitOfWorkPort,
)
from userguard.core.clock import Clock, utc_now
from userguard.core.security import generate_token_value, hash_token
from userguard.domain.entities.auth_token import AuthToken
from userguard.domain.events import AuthEvent, AuthEventPayload
from userguard.domain.exceptions import (
    ActiveTokenConflictError,
    TokenAlreadyConsumedError,
    TokenExpiredError,
    TokenNotFoundError,
)
from userguard.domain.value_objects.role import TokenPurpose

logger = logging.getLogger(__name__)

# A concurrent issue for the same (user, purpose) can win the insert once;
# the retry deletes the winner's token and inserts again.
ISSUE_ATTEMPTS = 2


class TokenIssuer:
    """Service for single-use, time-limited tokens."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        dispatcher: EventDispatcherPort,
        clock: Clock = utc_now,
    ):
        """
        Initialize token issuer.

        Args:
            uow_factory: Callable returning a fresh unit of work
            dispatcher: Receives on_expired_token events
            clock: Time source
        """
        self.uow_factory = uow_factory
        self.dispatcher = dispatcher
        self.clock = clock

    async def issue(
        self,
        user_id: UUID,
        purpose: TokenPurpose,
        ttl: timedelta | int,
    ) -> IssuedToken:
        """
        Issue a new token, replacing any unconsumed token of the same purpose.

        Args:
            user_id: Owner of the token
            purpose: What the token may be redeemed for
            ttl: Lifetime as a timedelta or a number of seconds (0 allowed)

        Returns:
            The issued token, including its plain value

        Raises:
            ValidationError: If ttl is negative
        """
        async with self.uow_factory() as uow:
            issued = await self.issue_in(uow, user_id, purpose, ttl)
            await uow.commit()
        return issued

    async def issue_in(
        self,
        uow: UnitOfWorkPort,
        user_id: UUID,
        purpose: TokenPurpose,
        ttl: timedelta | int,
    ) -> IssuedToken:
        """Issue a token inside an open unit of work."""
        lifetime = ttl if isinstance(ttl, timedelta) else timedelta(seconds=ttl)
        if lifetime < timedelta(0):
            raise ValidationError(
                "Token lifetime cannot be negative",
                field="ttl",
                value=lifetime,
            )

        purpose = _coerce_purpose(purpose)
        value = generate_token_value()
        now = self.clock()

        for attempt in range(1, ISSUE_ATTEMPTS + 1):
            replaced = await uow.auth_tokens.delete_active_for_user(user_id, purpose)
            token = AuthToken(
                id=uuid4(),
                user_id=user_id,
                purpose=purpose,
                token_hash=hash_token(value),
                issued_at=now,
                expires_at=now + lifetime,
            )
            try:
                await uow.auth_tokens.add(token)
            except ActiveTokenConflictError:
                if attempt == ISSUE_ATTEMPTS:
                    raise
                logger.warning(
                    f"Concurrent {purpose.value} token issue for user {user_id}, retrying"
                )
                continue
            break

        if replaced:
            logger.info(f"Replaced {replaced} active {purpose.value} token(s) for user {user_id}")
        logger.info(f"Issued {purpose.value} token for user {user_id}")

        return IssuedToken(
            value=value,
            purpose=purpose,
            user_id=user_id,
            issued_at=token.issued_at,
            expires_at=token.expires_at,
        )

    async def validate(
        self,
        value: str,
        purpose: TokenPurpose | None = None,
    ) -> TokenValidation:
        """
        Check a token without consuming it.

        Args:
            value: Plain token value
            purpose: When given, a token issued for another purpose is
                treated as unknown

        Returns:
            Owner and purpose of the token

        Raises:
            TokenNotFoundError: If the value matches no token
            TokenAlreadyConsumedError: If the token was already used
            TokenExpiredError: If the token expired. on_expired_token is
                emitted once before raising.
        """
        try:
            async with self.uow_factory() as uow:
                token = await self.resolve_in(uow, value, purpose)
        except TokenExpiredError as exc:
            await self.notify_expired(exc)
            raise

        return TokenValidation(user_id=token.user_id, purpose=token.purpose)

    async def consume(
        self,
        value: str,
        purpose: TokenPurpose | None = None,
    ) -> TokenValidation:
        """
        Validate and mark a token used in one step.

        Raises:
            TokenNotFoundError, TokenAlreadyConsumedError, TokenExpiredError
            as validate() does
        """
        try:
            async with self.uow_factory() as uow:
                token = await self.consume_in(uow, value, purpose)
                await uow.commit()
        except TokenExpiredError as exc:
            await self.notify_expired(exc)
            raise

        return TokenValidation(user_id=token.user_id, purpose=token.purpose)

    async def resolve_in(
        self,
        uow: UnitOfWorkPort,
        value: str,
        purpose: TokenPurpose | None = None,
    ) -> AuthToken:
        """
        Load a live token by value inside an open unit of work.

        Does not emit events. Callers that catch TokenExpiredError must
        pass it to notify_expired().
        """
        if purpose is not None:
            purpose = _coerce_purpose(purpose)
        token = await uow.auth_tokens.get_by_token_hash(hash_token(value or ""))

        if token is None or (purpose is not None and token.purpose != purpose):
            logger.warning("Token validation failed: token not found")
            raise TokenNotFoundError()

        if token.is_consumed:
            logger.warning(f"Token validation failed: token {token.id} already consumed")
            raise TokenAlreadyConsumedError()

        if token.is_expired(self.clock()):
            logger.warning(f"Token validation failed: token {token.id} expired")
            raise TokenExpiredError(token.user_id, token.purpose.value)

        return token

    async def consume_in(
        self,
        uow: UnitOfWorkPort,
        value: str,
        purpose: TokenPurpose | None = None,
    ) -> AuthToken:
        """Resolve and consume a token inside an open unit of work."""
        token = await self.resolve_in(uow, value, purpose)
        now = self.clock()

        # Conditional update: of two concurrent consumers only one wins
        if not await uow.auth_tokens.mark_consumed(token.id, now):
            logger.warning(f"Token consumption failed: token {token.id} already consumed")
            raise TokenAlreadyConsumedError()

        token.consume(now)
        logger.info(f"Consumed {token.purpose.value} token for user {token.user_id}")
        return token

    async def notify_expired(self, exc: TokenExpiredError) -> None:
        """Emit on_expired_token for an expiry detected during validation."""
        await self.dispatcher.emit(
            AuthEventPayload(
                event=AuthEvent.ON_EXPIRED_TOKEN,
                user_id=exc.user_id,
                context={"purpose": exc.purpose},
            )
        )

    async def purge_expired(self) -> int:
        """
        Delete expired tokens.

        Returns:
            Number of tokens deleted
        """
        async with self.uow_factory() as uow:
            deleted = await uow.auth_tokens.delete_expired(self.clock())
            await uow.commit()

        logger.info(f"Purged {deleted} expired token(s)")
        return deleted


def _coerce_purpose(purpose: TokenPurpose | str) -> TokenPurpose:
    try:
        return TokenPurpose(purpose)
    except ValueError:
        raise ValidationError(
            f"Unknown token purpose: {purpose}",
            field="purpose",
            value=purpose,
            constraint=", ".join(p.value for p in TokenPurpose),
        ) from None
