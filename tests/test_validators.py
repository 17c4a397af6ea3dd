"""Tests for registration and password policy validators."""

import pytest

from shelf_access.security.validators import (
    check_password_strength,
    validate_email,
    validate_password_change,
    validate_username,
)


class TestValidateEmail:
    """Tests for validate_email."""

    @pytest.mark.parametrize("value", ["a@b.c", "reader@x.com", "first.last+tag@mail.example.org"])
    def test_valid_addresses(self, value):
        assert validate_email(value) is True

    @pytest.mark.parametrize(
        "value",
        ["not-an-email", "", "a@b", "@b.c", "a@.c", "a b@c.d", "a@b.c\n", "a@@b.c"],
    )
    def test_invalid_addresses(self, value):
        assert validate_email(value) is False


class TestValidateUsername:
    """Tests for validate_username."""

    def test_valid_username(self):
        result = validate_username("user_1")
        assert result.valid is True
        assert result.issues == []

    def test_chinese_characters_allowed(self):
        assert validate_username("读书人_01").valid is True

    def test_too_short(self):
        result = validate_username("ab")
        assert result.valid is False
        assert any("at least 3" in issue for issue in result.issues)

    def test_too_long(self):
        result = validate_username("a" * 21)
        assert result.valid is False
        assert any("at most 20" in issue for issue in result.issues)

    def test_boundaries_accepted(self):
        assert validate_username("abc").valid is True
        assert validate_username("a" * 20).valid is True

    def test_all_digits_rejected_even_in_range(self):
        result = validate_username("12345")
        assert result.valid is False
        assert result.issues == ["Username cannot consist only of digits"]

    def test_illegal_characters(self):
        result = validate_username("bad-name!")
        assert result.valid is False
        assert any("only contain" in issue for issue in result.issues)

    def test_reports_every_violation(self):
        # Too short, illegal character
        result = validate_username("a!")
        assert result.valid is False
        assert len(result.issues) == 2

    def test_trailing_newline_rejected(self):
        assert validate_username("reader\n").valid is False


class TestCheckPasswordStrength:
    """Tests for check_password_strength."""

    def test_strong_password(self):
        result = check_password_strength("Abcdef1")
        assert result.strong is True
        assert result.issues == []

    def test_abc_reports_all_violations(self):
        result = check_password_strength("abc")
        assert result.strong is False
        assert result.issues == [
            "Password must be at least 6 characters",
            "Password must contain an uppercase letter",
            "Password must contain a digit",
        ]

    def test_missing_lowercase(self):
        result = check_password_strength("ABCDEF1")
        assert result.strong is False
        assert result.issues == ["Password must contain a lowercase letter"]

    def test_denylist_is_case_insensitive(self):
        result = check_password_strength("ABC123")
        assert result.strong is False
        assert "Password is too common" in result.issues

    def test_denylist_alongside_other_rules(self):
        result = check_password_strength("password")
        assert result.strong is False
        assert "Password is too common" in result.issues
        assert "Password must contain an uppercase letter" in result.issues
        assert "Password must contain a digit" in result.issues

    def test_empty_password(self):
        result = check_password_strength("")
        assert result.strong is False
        assert len(result.issues) == 4


class TestValidatePasswordChange:
    """Tests for validate_password_change."""

    def test_valid_change(self):
        assert validate_password_change("OldPass1", "NewPass1", "NewPass1") == []

    def test_missing_fields(self):
        assert validate_password_change("", "NewPass1", "NewPass1") == ["All fields are required"]

    def test_mismatch(self):
        issues = validate_password_change("OldPass1", "NewPass1", "NewPass2")
        assert issues == ["New passwords do not match"]

    def test_too_short_and_same_as_current(self):
        issues = validate_password_change("abc", "abc", "abc")
        assert len(issues) == 2
