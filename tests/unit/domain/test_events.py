"""Unit tests for event payloads."""

from dataclasses import FrozenInstanceError

import pytest

from userguard.domain.events import AuthEvent, AuthEventPayload


def test_event_names():
    assert {event.value for event in AuthEvent} == {
        "before_register",
        "after_register",
        "after_login",
        "before_logout",
        "after_logout",
        "after_change_password",
        "before_social_login_user_create",
        "on_expired_token",
        "after_resend_token_validation",
    }


def test_payload_is_immutable():
    payload = AuthEventPayload(event=AuthEvent.AFTER_LOGIN)
    assert payload.user_id is None
    assert payload.occurred_at.tzinfo is not None
    with pytest.raises(FrozenInstanceError):
        payload.user_id = None
