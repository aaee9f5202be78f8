"""Token request and response models for the client credentials grant.

Contains the immutable token request and the parsed token endpoint
responses (RFC 6749 Sections 4.4 and 5).
"""

from __future__ import annotations

import base64
import time
from dataclasses import dataclass, field

from pydantic import BaseModel

from soundcircle.auth.client.constants import SPOTIFY_TOKEN_URL


@dataclass(frozen=True)
class ClientCredentialsRequest:
    """OAuth client credentials request parameters (RFC 6749 Section 4.4.2).

    Immutable request parameters for a server-to-server token exchange.
    The client secret is kept out of the repr.
    """

    # Required fields first
    client_id: str
    client_secret: str = field(repr=False)

    # Optional fields with defaults last
    token_endpoint: str = SPOTIFY_TOKEN_URL
    grant_type: str = "client_credentials"
    scope: str | None = None

    def to_form_data(self) -> dict[str, str]:
        """Convert to form data for application/x-www-form-urlencoded request.

        Client credentials travel in the Authorization header, not the body.

        Returns:
            Dictionary suitable for httpx data parameter
        """
        data = {"grant_type": self.grant_type}

        if self.scope:
            data["scope"] = self.scope

        return data

    def basic_auth_header(self) -> str:
        """Build the HTTP Basic credentials value (RFC 6749 Section 2.3.1)."""
        raw = f"{self.client_id}:{self.client_secret}".encode("utf-8")
        return f"Basic {base64.b64encode(raw).decode('ascii')}"


class TokenResponse(BaseModel):
    """Successful token endpoint response (RFC 6749 Section 5.1).

    All fields are exposed; refresh and expiry tracking belong to the caller.
    """

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None  # Seconds until expiry
    scope: str | None = None
    refresh_token: str | None = None

    def calculate_expires_at(self, now: float | None = None) -> float | None:
        """Calculate absolute expiry timestamp from expires_in.

        Returns:
            Unix timestamp when token expires, or None if no expiry
        """
        if self.expires_in is None:
            return None
        return (time.time() if now is None else now) + self.expires_in

    def authorization_header(self) -> dict[str, str]:
        """Header for authenticating subsequent Web API calls."""
        return {"Authorization": f"Bearer {self.access_token}"}


class TokenErrorResponse(BaseModel):
    """Token endpoint error response (RFC 6749 Section 5.2)."""

    error: str = "unknown_error"
    error_description: str | None = None
    error_uri: str | None = None
