"""
Spotify OAuth constants.

Public endpoint values from the Spotify Web API authorization guides.
"""

# OAuth endpoints
SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"

# PKCE
CODE_CHALLENGE_METHOD = "S256"
DEFAULT_VERIFIER_LENGTH = 64

# Seconds per token request; requests are not retried
DEFAULT_TIMEOUT = 10.0
