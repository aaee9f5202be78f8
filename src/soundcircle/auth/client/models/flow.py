"""Models for the Spotify authorization code (PKCE) redirect and callback."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qs, urlencode

from soundcircle.auth.client.constants import CODE_CHALLENGE_METHOD


@dataclass(frozen=True)
class AuthorizationRequest:
    """Parameters of the Spotify /authorize redirect (RFC 6749 Section 4.1.1).

    Carries only the S256 challenge; the verifier stays with the caller
    until the code exchange.
    """

    authorization_endpoint: str
    client_id: str
    redirect_uri: str
    code_challenge: str
    state: str
    scope: str | None = None
    code_challenge_method: str = CODE_CHALLENGE_METHOD

    def __post_init__(self) -> None:
        if self.code_challenge_method != CODE_CHALLENGE_METHOD:
            raise ValueError(
                f"Spotify only accepts {CODE_CHALLENGE_METHOD} challenges, "
                f"got {self.code_challenge_method!r}"
            )

    def build_authorization_url(self) -> str:
        """Build the URL the user is sent to; scope is omitted when unset."""
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "code_challenge_method": self.code_challenge_method,
            "code_challenge": self.code_challenge,
            "state": self.state,
        }
        if self.scope:
            params["scope"] = self.scope

        return f"{self.authorization_endpoint}?{urlencode(params)}"


@dataclass(frozen=True)
class AuthorizationResponse:
    """Query parameters Spotify appends to the redirect URI.

    Holds either a ``code`` or an ``error`` such as ``access_denied``, plus
    the echoed ``state``.
    """

    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None

    @classmethod
    def from_query(cls, query: str) -> AuthorizationResponse:
        """Read the callback query string; repeated keys keep the first value."""
        values = parse_qs(query)

        def first(key: str) -> str | None:
            found = values.get(key, [])
            return found[0] if found else None

        return cls(
            code=first("code"),
            state=first("state"),
            error=first("error"),
            error_description=first("error_description"),
        )

    def is_success(self) -> bool:
        return self.error is None and self.code is not None

    def is_error(self) -> bool:
        return self.error is not None
