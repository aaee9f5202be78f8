"""Spotify client credentials token service.

Implements the RFC 6749 Section 4.4 client credentials grant used for
server-to-server catalog lookups that are not tied to a user.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from soundcircle.auth.client.constants import DEFAULT_TIMEOUT, SPOTIFY_TOKEN_URL
from soundcircle.auth.client.models.errors import (
    AuthenticationFailedError,
    TokenEndpointError,
)
from soundcircle.auth.client.models.tokens import (
    ClientCredentialsRequest,
    TokenErrorResponse,
    TokenResponse,
)

logger = logging.getLogger(__name__)

AUTHENTICATION_FAILED_MESSAGE = "Unable to authenticate with Spotify"


def _describe_failure(error: Exception) -> str:
    """Summarize a failure for the log without echoing response field values."""
    if isinstance(error, ValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['type']}"
            for err in error.errors(include_url=False, include_input=False)
        )
        return f"ValidationError({problems})"
    return f"{type(error).__name__}: {error}"


class ClientCredentialsTokenManager:
    """Fetches access tokens with the client credentials grant.

    Sends exactly one form-encoded POST per call with a bounded timeout and
    no retries. Upstream OAuth errors surface as TokenEndpointError; every
    other failure is logged and surfaces as AuthenticationFailedError.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the token manager.

        Args:
            timeout: HTTP request timeout in seconds
            http_client: Optional shared client; the caller keeps ownership
        """
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http_client = (
            httpx.AsyncClient(timeout=timeout) if http_client is None else http_client
        )

    async def __aenter__(self) -> ClientCredentialsTokenManager:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def fetch_token(self, token_request: ClientCredentialsRequest) -> TokenResponse:
        """Exchange client credentials for an access token.

        Args:
            token_request: Client credentials request parameters

        Returns:
            TokenResponse: Every field the token endpoint returned

        Raises:
            TokenEndpointError: If the endpoint returned a structured error
            AuthenticationFailedError: On network, timeout or parsing failures
        """
        logger.debug(f"Requesting client credentials token at {token_request.token_endpoint}")

        try:
            headers = {
                "Content-Type": "application/x-www-form-urlencoded",
                "Accept": "application/json",
                "Authorization": token_request.basic_auth_header(),
            }

            response = await self._http_client.post(
                token_request.token_endpoint,
                data=token_request.to_form_data(),
                headers=headers,
                timeout=self.timeout,
            )

            return self._parse_token_response(response)

        except TokenEndpointError:
            raise
        except Exception as e:
            logger.error(f"Failed to get Spotify token: {_describe_failure(e)}")
            raise AuthenticationFailedError(AUTHENTICATION_FAILED_MESSAGE) from None

    def _parse_token_response(self, response: httpx.Response) -> TokenResponse:
        """Parse token endpoint response into TokenResponse.

        Raises:
            TokenEndpointError: For non-2xx responses with a JSON error body
            ValueError: If the body is not a valid JSON object or token payload
        """
        response_data = response.json()
        if not isinstance(response_data, dict):
            raise ValueError(f"Expected JSON object, got {type(response_data).__name__}")

        if response.is_success:
            token_response = TokenResponse.model_validate(response_data)
            logger.info(
                f"Client credentials token issued, expires in {token_response.expires_in}s"
            )
            return token_response

        error_response = TokenErrorResponse.model_validate(response_data)
        logger.warning(
            f"Token request failed with {response.status_code}: "
            f"{error_response.error} - {error_response.error_description}"
        )
        raise TokenEndpointError(
            f"Spotify API error: {error_response.error}",
            error_code=error_response.error,
            error_description=error_response.error_description,
            status_code=response.status_code,
        )

    async def close(self) -> None:
        """Close the HTTP client if this manager created it."""
        if self._owns_client:
            await self._http_client.aclose()


async def fetch_access_token(
    client_id: str,
    client_secret: str,
    *,
    token_endpoint: str = SPOTIFY_TOKEN_URL,
    scope: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    http_client: httpx.AsyncClient | None = None,
) -> str:
    """Fetch a bearer token string for catalog API calls.

    Credentials are passed explicitly so several credential sets can be used
    side by side. See ClientCredentialsTokenManager.fetch_token for errors.
    """
    token_request = ClientCredentialsRequest(
        client_id=client_id,
        client_secret=client_secret,
        token_endpoint=token_endpoint,
        scope=scope,
    )

    async with ClientCredentialsTokenManager(timeout, http_client) as manager:
        token_response = await manager.fetch_token(token_request)

    return token_response.access_token
