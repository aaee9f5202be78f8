"""Spotify application configuration.

Credentials are plain values handed to the token and flow services.
``SpotifyClientConfig.from_env`` is a convenience for processes that keep
them in the environment or a ``.env`` file.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from soundcircle.auth.client.constants import (
    DEFAULT_TIMEOUT,
    SPOTIFY_AUTHORIZE_URL,
    SPOTIFY_TOKEN_URL,
)
from soundcircle.auth.client.models.errors import ConfigurationError
from soundcircle.auth.client.models.security import PKCEParameters
from soundcircle.auth.client.models.tokens import ClientCredentialsRequest
from soundcircle.auth.client.services.flow import AuthorizationFlowManager


@dataclass(frozen=True)
class SpotifyClientConfig:
    client_id: str
    client_secret: str = field(repr=False)
    token_endpoint: str = SPOTIFY_TOKEN_URL
    authorization_endpoint: str = SPOTIFY_AUTHORIZE_URL
    redirect_uri: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(
        cls, dotenv_path: str | os.PathLike[str] | None = None
    ) -> SpotifyClientConfig:
        """Load configuration from the environment.

        Reads SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET (required) and
        SPOTIFY_REDIRECT_URI, SPOTIFY_TOKEN_URL, SPOTIFY_AUTHORIZE_URL and
        SPOTIFY_HTTP_TIMEOUT (optional). Values already in the environment
        win over the .env file.

        Raises:
            ConfigurationError: If credentials are missing or the timeout
                is not a finite positive number
        """
        load_dotenv(dotenv_path)

        client_id = os.getenv("SPOTIFY_CLIENT_ID")
        client_secret = os.getenv("SPOTIFY_CLIENT_SECRET")
        missing = [
            name
            for name, value in (
                ("SPOTIFY_CLIENT_ID", client_id),
                ("SPOTIFY_CLIENT_SECRET", client_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing environment variables: {', '.join(missing)}")

        raw_timeout = os.getenv("SPOTIFY_HTTP_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(
                f"SPOTIFY_HTTP_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from None
        if not math.isfinite(timeout) or timeout <= 0:
            raise ConfigurationError(
                f"SPOTIFY_HTTP_TIMEOUT must be a finite positive number, got {raw_timeout!r}"
            )

        return cls(
            client_id=client_id,
            client_secret=client_secret,
            token_endpoint=os.getenv("SPOTIFY_TOKEN_URL") or SPOTIFY_TOKEN_URL,
            authorization_endpoint=os.getenv("SPOTIFY_AUTHORIZE_URL") or SPOTIFY_AUTHORIZE_URL,
            redirect_uri=os.getenv("SPOTIFY_REDIRECT_URI") or None,
            timeout=timeout,
        )

    def to_token_request(self, scope: str | None = None) -> ClientCredentialsRequest:
        """Build a client credentials request for this application."""
        return ClientCredentialsRequest(
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_endpoint=self.token_endpoint,
            scope=scope,
        )

    def to_flow_manager(self) -> AuthorizationFlowManager:
        """Build a flow manager pointed at this application's authorize endpoint."""
        return AuthorizationFlowManager(authorization_endpoint=self.authorization_endpoint)

    def start_authorization_flow(
        self,
        scope: str | None = None,
        flow_manager: AuthorizationFlowManager | None = None,
    ) -> tuple[str, PKCEParameters, str]:
        """Start the user login redirect with this application's settings.

        Returns:
            Tuple of (authorization_url, pkce_parameters, state), see
            AuthorizationFlowManager.start_authorization_flow

        Raises:
            ConfigurationError: If no redirect URI is configured
        """
        if not self.redirect_uri:
            raise ConfigurationError(
                "redirect_uri is required for the authorization flow (SPOTIFY_REDIRECT_URI)"
            )

        flow_manager = flow_manager or self.to_flow_manager()
        return flow_manager.start_authorization_flow(
            self.client_id, self.redirect_uri, scope=scope
        )
