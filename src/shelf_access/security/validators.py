"""Policy validators for registration and password changes.

Pure functions: no I/O, no state. They run before any network call and
are the first line of defense only; the store may enforce overlapping
constraints on its own.
"""

import re

from shelf_access.models.results import PasswordCheck, UsernameCheck

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Letters, digits, underscore and CJK unified ideographs
USERNAME_PATTERN = re.compile(r"[a-zA-Z0-9_\u4e00-\u9fa5]+")
DIGITS_PATTERN = re.compile(r"[0-9]+")

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 6

COMMON_PASSWORDS = frozenset({"password", "123456", "qwerty", "abc123"})


def validate_email(value: str) -> bool:
    """Check that a value has the general ``local@domain.tld`` shape."""
    return bool(EMAIL_PATTERN.fullmatch(value))


def validate_username(value: str) -> UsernameCheck:
    """Check a username against every naming rule.

    Args:
        value: The candidate username

    Returns:
        UsernameCheck listing all violated rules, not just the first
    """
    issues: list[str] = []

    if len(value) < USERNAME_MIN_LENGTH:
        issues.append(f"Username must be at least {USERNAME_MIN_LENGTH} characters")

    if len(value) > USERNAME_MAX_LENGTH:
        issues.append(f"Username must be at most {USERNAME_MAX_LENGTH} characters")

    if not USERNAME_PATTERN.fullmatch(value):
        issues.append(
            "Username may only contain letters, digits, underscores and Chinese characters"
        )

    if DIGITS_PATTERN.fullmatch(value):
        issues.append("Username cannot consist only of digits")

    return UsernameCheck(valid=not issues, issues=issues)


def check_password_strength(value: str) -> PasswordCheck:
    """Check a password against every strength rule.

    Args:
        value: The candidate password

    Returns:
        PasswordCheck listing all violated rules, not just the first
    """
    issues: list[str] = []

    if len(value) < PASSWORD_MIN_LENGTH:
        issues.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")

    if not re.search(r"[a-z]", value):
        issues.append("Password must contain a lowercase letter")

    if not re.search(r"[A-Z]", value):
        issues.append("Password must contain an uppercase letter")

    if not re.search(r"[0-9]", value):
        issues.append("Password must contain a digit")

    if value.lower() in COMMON_PASSWORDS:
        issues.append("Password is too common")

    return PasswordCheck(strong=not issues, issues=issues)


def validate_password_change(current: str, new: str, confirm: str) -> list[str]:
    """Check a password change form before it reaches the provider.

    Returns:
        List of problems; empty when the change may proceed
    """
    if not current or not new or not confirm:
        return ["All fields are required"]

    issues: list[str] = []
    if new != confirm:
        issues.append("New passwords do not match")
    if len(new) < PASSWORD_MIN_LENGTH:
        issues.append(f"New password must be at least {PASSWORD_MIN_LENGTH} characters")
    if new == current:
        issues.append("New password must differ from the current password")
    return issues
