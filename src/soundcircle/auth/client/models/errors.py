"""Exception hierarchy for Spotify OAuth authentication errors.

Provides specific exception types for different failure modes to enable
precise error handling. Token failures additionally carry a ``kind`` tag so
callers can tell upstream protocol errors from opaque failures by inspection.
"""

from __future__ import annotations

from enum import Enum


class AuthErrorKind(str, Enum):
    """Category of a token failure."""

    PROTOCOL = "protocol"
    AUTHENTICATION_FAILED = "authentication_failed"


class OAuth2Error(Exception):
    """Base exception for all OAuth related errors."""

    pass


class ConfigurationError(OAuth2Error):
    """Raised when client configuration is missing or invalid."""

    pass


class PKCEError(OAuth2Error):
    """Raised when PKCE parameter generation fails."""

    pass


class TokenError(OAuth2Error):
    """Raised when token operations fail."""

    kind: AuthErrorKind = AuthErrorKind.AUTHENTICATION_FAILED


class TokenEndpointError(TokenError):
    """Raised when the token endpoint answers with a structured OAuth error.

    Carries the upstream ``error`` and ``error_description`` fields
    (RFC 6749 Section 5.2) so callers can act on them.
    """

    kind = AuthErrorKind.PROTOCOL

    def __init__(
        self,
        message: str,
        error_code: str,
        error_description: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.error_description = error_description
        self.status_code = status_code


class AuthenticationFailedError(TokenError):
    """Raised for any non-protocol token failure.

    Transport and parsing details are not attached; they are
    logged where the failure happens.
    """

    kind = AuthErrorKind.AUTHENTICATION_FAILED


class AuthorizationError(OAuth2Error):
    """Raised when starting the user authorization flow fails."""

    pass


class AuthorizationCallbackError(OAuth2Error):
    """Raised when authorization server callback data is malformed or invalid.

    This indicates the authorization server sent an invalid callback URL,
    not that our callback handling code failed.
    """

    pass


class StateValidationError(AuthorizationCallbackError):
    """Raised when OAuth state parameter validation fails.

    This indicates either a missing state parameter or a state mismatch,
    which could indicate a CSRF attack or authorization server issue.
    """

    pass
