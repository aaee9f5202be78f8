"""Spotify authorization code flow (with PKCE) orchestration.

Builds the user authorization redirect from a fresh PKCE pair and validates
the callback the authorization server sends back. Exchanging the returned
code for a user token is left to the caller, who holds the verifier.
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from soundcircle.auth.client.constants import (
    DEFAULT_VERIFIER_LENGTH,
    SPOTIFY_AUTHORIZE_URL,
)
from soundcircle.auth.client.models.errors import (
    AuthorizationCallbackError,
    AuthorizationError,
    StateValidationError,
)
from soundcircle.auth.client.models.flow import (
    AuthorizationRequest,
    AuthorizationResponse,
)
from soundcircle.auth.client.models.security import PKCEParameters
from soundcircle.auth.client.primitives.pkce import PKCEManager
from soundcircle.auth.client.services.security import generate_state, validate_state

logger = logging.getLogger(__name__)


class AuthorizationFlowManager:
    """Orchestrates the user-facing half of the authorization code flow.

    Handles:
    - PKCE parameter generation
    - State parameter security (CSRF protection)
    - Authorization URL construction
    - Callback URL parsing and validation
    """

    def __init__(
        self,
        authorization_endpoint: str = SPOTIFY_AUTHORIZE_URL,
        pkce_manager: PKCEManager | None = None,
        verifier_length: int = DEFAULT_VERIFIER_LENGTH,
    ):
        self.authorization_endpoint = authorization_endpoint
        self.verifier_length = verifier_length
        self._pkce_manager = pkce_manager or PKCEManager()

    def start_authorization_flow(
        self,
        client_id: str,
        redirect_uri: str,
        scope: str | None = None,
    ) -> tuple[str, PKCEParameters, str]:
        """Start an authorization code flow.

        Args:
            client_id: Spotify application client ID
            redirect_uri: URI registered for the application
            scope: Optional space-separated scopes to request

        Returns:
            Tuple of (authorization_url, pkce_parameters, state)
            - authorization_url: URL for user to visit
            - pkce_parameters: Keep the verifier for the code exchange
            - state: Keep this for callback validation

        Raises:
            AuthorizationError: If flow setup fails
        """
        try:
            pkce_params = self._pkce_manager.generate_parameters(self.verifier_length)
            state = generate_state()

            auth_request = AuthorizationRequest(
                authorization_endpoint=self.authorization_endpoint,
                client_id=client_id,
                redirect_uri=redirect_uri,
                code_challenge=pkce_params.code_challenge,
                code_challenge_method=pkce_params.code_challenge_method,
                state=state,
                scope=scope,
            )
            authorization_url = auth_request.build_authorization_url()

        except Exception as e:
            raise AuthorizationError(f"Failed to start authorization flow: {e}") from e

        logger.info(f"Generated authorization URL for client {client_id}")
        return authorization_url, pkce_params, state

    def handle_authorization_callback(
        self,
        callback_url: str,
        expected_state: str,
    ) -> AuthorizationResponse:
        """Handle the redirect back from the authorization server.

        Raises:
            AuthorizationCallbackError: If callback URL is malformed
            StateValidationError: If state parameter is missing or doesn't match
        """
        try:
            auth_response = self._parse_callback_url(callback_url)

            if auth_response.state is None:
                raise StateValidationError(
                    "Authorization server callback missing required state parameter"
                )

            validate_state(expected_state, auth_response.state)

        except StateValidationError:
            raise
        except Exception as e:
            raise AuthorizationCallbackError(
                f"Failed to process authorization callback: {e}"
            ) from e

        if auth_response.is_success():
            logger.info("Authorization callback successful - received authorization code")
        elif auth_response.is_error():
            logger.warning(
                f"Authorization callback contained error: {auth_response.error}"
            )
        else:
            logger.warning("Authorization callback missing both code and error")

        return auth_response

    def _parse_callback_url(self, callback_url: str) -> AuthorizationResponse:
        parsed = urlparse(callback_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"not an absolute URL: {callback_url!r}")
        return AuthorizationResponse.from_query(parsed.query)
