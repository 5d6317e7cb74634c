"""Unit tests for token and password helpers."""

import re

import pytest
from factories import make_settings

from userguard.core.security import (
    generate_password,
    generate_token_value,
    hash_token,
    validate_password_strength,
    verify_token_hash,
)


class TestOpaqueTokens:
    """Test token generation and hashing."""

    def test_token_values_are_unique_and_url_safe(self):
        values = {generate_token_value() for _ in range(50)}
        assert len(values) == 50
        assert all(re.fullmatch(r"[A-Za-z0-9_-]{43,}", value) for value in values)

    def test_hash_token_is_sha256_hex(self):
        digest = hash_token("abc")
        assert digest == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

    def test_verify_token_hash(self):
        value = generate_token_value()
        assert verify_token_hash(value, hash_token(value))
        assert not verify_token_hash(value + "x", hash_token(value))


class TestGeneratePassword:
    def test_generated_password_satisfies_default_policy(self):
        settings = make_settings()
        for _ in range(20):
            password = generate_password()
            assert len(password) == 20
            assert validate_password_strength(password, settings) == (True, None)


class TestValidatePasswordStrength:
    """Test password policy."""

    @pytest.mark.parametrize(
        "password,fragment",
        [
            ("Sh0rt!", "at least 8 characters"),
            ("lowercase1!", "uppercase"),
            ("UPPERCASE1!", "lowercase"),
            ("NoDigits!!", "digit"),
            ("NoSpecial12", "special"),
        ],
    )
    def test_weak_passwords(self, password, fragment):
        is_valid, message = validate_password_strength(password, make_settings())
        assert is_valid is False
        assert fragment in message

    def test_strong_password(self):
        assert validate_password_strength("Str0ng!Pass", make_settings()) == (True, None)

    def test_policy_is_configurable(self):
        settings = make_settings(
            password_min_length=4,
            password_require_uppercase=False,
            password_require_digit=False,
            password_require_special=False,
        )
        assert validate_password_strength("abcd", settings) == (True, None)
