"""Tests for account input validators."""

import pytest

from eduregistry.core.modules.auth.validators import validate_email, validate_password
from eduregistry.errors import ValidationError


class TestValidatePassword:
    """Tests for password requirements."""

    def test_valid_password_accepted(self):
        """Test that a long enough password without whitespace passes."""
        validate_password("secret1")
        validate_password("abcdef")

    def test_short_password_rejected(self):
        """Test that passwords under 6 characters are rejected."""
        with pytest.raises(ValidationError, match="at least 6 characters"):
            validate_password("abc")

    def test_whitespace_rejected(self):
        """Test that whitespace is not allowed."""
        with pytest.raises(ValidationError, match="whitespace"):
            validate_password("secret password")


class TestValidateEmail:
    """Tests for email shape checks."""

    def test_valid_email_accepted(self):
        """Test that ordinary addresses pass."""
        validate_email("school@example.com")
        validate_email("first.last@mail.example.ng")

    @pytest.mark.parametrize("email", ["", "no-at-sign", "@example.com", "user@", "user@localhost", "user@.com", "user@example."])
    def test_invalid_email_rejected(self, email):
        """Test that malformed addresses are rejected."""
        with pytest.raises(ValidationError, match="valid email"):
            validate_email(email)
