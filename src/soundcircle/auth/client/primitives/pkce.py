"""PKCE (Proof Key for Code Exchange) generation for the Spotify user login.

Implements RFC 7636 verifier generation and the S256 challenge transform.
The verifier stays with the initiating party; only the challenge is sent in
the authorization redirect.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
import string
from enum import Enum

from soundcircle.auth.client.constants import DEFAULT_VERIFIER_LENGTH
from soundcircle.auth.client.models.errors import PKCEError
from soundcircle.auth.client.models.security import PKCEParameters

VERIFIER_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


class SelectionPolicy(str, Enum):
    """How random bytes are mapped onto the verifier alphabet.

    UNIFORM uses ``secrets.choice`` (rejection sampling, no bias).
    MODULO maps each random byte with ``byte % 62``; 256 is not a multiple
    of 62, so the first 8 symbols are slightly more likely. Only use it when
    output must match other clients that generate verifiers that way.
    """

    UNIFORM = "uniform"
    MODULO = "modulo"


def generate_code_verifier(
    length: int = DEFAULT_VERIFIER_LENGTH,
    policy: SelectionPolicy = SelectionPolicy.UNIFORM,
) -> str:
    """Generate a cryptographically secure code verifier.

    Args:
        length: Number of characters, at least 1
        policy: Byte-to-symbol mapping, see SelectionPolicy

    Returns:
        A string of exactly ``length`` characters from [A-Za-z0-9]

    Raises:
        ValueError: If length is not a positive integer
    """
    if isinstance(length, bool) or not isinstance(length, int):
        raise ValueError(f"length must be an integer, got {type(length).__name__}")
    if length < 1:
        raise ValueError(f"length must be positive, got {length}")

    if policy is SelectionPolicy.MODULO:
        alphabet_size = len(VERIFIER_ALPHABET)
        return "".join(
            VERIFIER_ALPHABET[byte % alphabet_size]
            for byte in secrets.token_bytes(length)
        )

    return "".join(secrets.choice(VERIFIER_ALPHABET) for _ in range(length))


def derive_code_challenge(code_verifier: str) -> str:
    """Derive the S256 code challenge for a verifier.

    RFC 7636 Section 4.2: BASE64URL-ENCODE(SHA256(code_verifier)), with the
    verifier encoded as UTF-8 and trailing '=' padding removed.
    """
    digest = hashlib.sha256(code_verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


class PKCEManager:
    """Generates PKCE pairs for Spotify authorization-code flows.

    The challenge is always derived from the verifier it is returned with,
    so callers never have to pair the two themselves.
    """

    def __init__(self, policy: SelectionPolicy = SelectionPolicy.UNIFORM):
        self.policy = policy

    def generate_parameters(
        self, length: int = DEFAULT_VERIFIER_LENGTH
    ) -> PKCEParameters:
        """Generate new PKCE parameters for an authorization attempt.

        Returns:
            PKCEParameters: Immutable verifier/challenge pair

        Raises:
            ValueError: If length is not a positive integer
            PKCEError: If the random source fails
        """
        try:
            code_verifier = generate_code_verifier(length, self.policy)
        except ValueError:
            raise
        except Exception as e:
            raise PKCEError(f"Failed to generate code verifier: {e}") from e

        return PKCEParameters(
            code_verifier=code_verifier,
            code_challenge=derive_code_challenge(code_verifier),
        )
