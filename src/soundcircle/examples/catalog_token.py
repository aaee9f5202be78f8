"""
Fetch a Spotify client credentials token for catalog lookups.

You'll need to set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET, either in
the environment or in a .env file.

Spotify guide: https://developer.spotify.com/documentation/web-api/tutorials/client-credentials-flow
"""

import asyncio
import logging
import sys

from soundcircle.auth.client.config import SpotifyClientConfig
from soundcircle.auth.client.models.errors import (
    ConfigurationError,
    TokenEndpointError,
    TokenError,
)
from soundcircle.auth.client.services.tokens import ClientCredentialsTokenManager


async def main() -> int:
    try:
        config = SpotifyClientConfig.from_env()
    except ConfigurationError as e:
        logging.error(f"Configuration error: {e}")
        return 2

    async with ClientCredentialsTokenManager(timeout=config.timeout) as manager:
        try:
            token = await manager.fetch_token(config.to_token_request())
        except TokenEndpointError as e:
            logging.error(f"Spotify rejected the credentials: {e.error_code} ({e.error_description})")
            return 1
        except TokenError as e:
            logging.error(str(e))
            return 1

    logging.info(f"Got a {token.token_type} token valid for {token.expires_in}s")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main()))
