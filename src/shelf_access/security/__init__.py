"""Local policy checks."""

from shelf_access.security.validators import (
    check_password_strength,
    validate_email,
    validate_password_change,
    validate_username,
)

__all__ = [
    "check_password_strength",
    "validate_email",
    "validate_password_change",
    "validate_username",
]
