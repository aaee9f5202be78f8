"""Security-related models for OAuth authentication.

Contains the PKCE verifier/challenge pair handed to the user authorization
redirect.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from soundcircle.auth.client.constants import CODE_CHALLENGE_METHOD


@dataclass(frozen=True)
class PKCEParameters:
    """PKCE (Proof Key for Code Exchange) parameters.

    Immutable pair generated for each authorization attempt (RFC 7636). The
    challenge must be the S256 transform of this exact verifier.
    """

    code_verifier: str = field(repr=False)
    code_challenge: str = field()
    code_challenge_method: str = field(default=CODE_CHALLENGE_METHOD)

    def __post_init__(self) -> None:
        """Validate the verifier/challenge pairing."""
        from soundcircle.auth.client.primitives.pkce import derive_code_challenge

        if not self.code_verifier:
            raise ValueError("code_verifier must not be empty")
        if self.code_challenge_method != CODE_CHALLENGE_METHOD:
            raise ValueError("Only S256 code challenge method is supported")
        if self.code_challenge != derive_code_challenge(self.code_verifier):
            raise ValueError("code_challenge was not derived from code_verifier")
