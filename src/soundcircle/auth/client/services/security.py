"""Security utilities for the authorization redirect.

Provides cryptographically secure state generation and constant-time state
validation for CSRF protection.
"""

from __future__ import annotations

import secrets
import string

from soundcircle.auth.client.models.errors import StateValidationError

STATE_LENGTH = 32


def generate_state() -> str:
    """Generate cryptographically secure state parameter.

    The state parameter provides CSRF protection by ensuring the callback
    matches the original authorization request.

    Returns:
        Cryptographically secure random state string (32 characters)
    """
    alphabet = string.ascii_letters + string.digits + "-_"
    return "".join(secrets.choice(alphabet) for _ in range(STATE_LENGTH))


def validate_state(expected: str, actual: str) -> None:
    """Validate state parameter matches expected value.

    Raises:
        StateValidationError: If state parameters don't match
    """
    if not secrets.compare_digest(expected.encode(), actual.encode()):
        raise StateValidationError("State parameter mismatch - possible CSRF attack")
