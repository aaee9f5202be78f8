from urllib.parse import parse_qs, urlparse

import pytest

from soundcircle.auth.client.config import SpotifyClientConfig
from soundcircle.auth.client.constants import (
    DEFAULT_TIMEOUT,
    SPOTIFY_AUTHORIZE_URL,
    SPOTIFY_TOKEN_URL,
)
from soundcircle.auth.client.models.errors import ConfigurationError

ENV_NAMES = [
    "SPOTIFY_CLIENT_ID",
    "SPOTIFY_CLIENT_SECRET",
    "SPOTIFY_REDIRECT_URI",
    "SPOTIFY_TOKEN_URL",
    "SPOTIFY_AUTHORIZE_URL",
    "SPOTIFY_HTTP_TIMEOUT",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Start without Spotify variables; anything load_dotenv sets is undone."""
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return tmp_path / "missing.env"


class TestFromEnv:
    def test_reads_required_credentials(self, monkeypatch, clean_env):
        # Arrange
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "client-456")
        monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "secret-789")

        # Act
        config = SpotifyClientConfig.from_env(clean_env)

        # Assert
        assert config.client_id == "client-456"
        assert config.client_secret == "secret-789"
        assert config.token_endpoint == SPOTIFY_TOKEN_URL
        assert config.redirect_uri is None
        assert config.authorization_endpoint == SPOTIFY_AUTHORIZE_URL
        assert config.timeout == DEFAULT_TIMEOUT

    def test_reads_optional_settings(self, monkeypatch, clean_env):
        # Arrange
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "client-456")
        monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "secret-789")
        monkeypatch.setenv("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:8888/callback")
        monkeypatch.setenv("SPOTIFY_TOKEN_URL", "https://auth.example.com/token")
        monkeypatch.setenv("SPOTIFY_AUTHORIZE_URL", "https://auth.example.com/authorize")
        monkeypatch.setenv("SPOTIFY_HTTP_TIMEOUT", "2.5")

        # Act
        config = SpotifyClientConfig.from_env(clean_env)

        # Assert
        assert config.redirect_uri == "http://127.0.0.1:8888/callback"
        assert config.token_endpoint == "https://auth.example.com/token"
        assert config.authorization_endpoint == "https://auth.example.com/authorize"
        assert config.timeout == 2.5

    def test_missing_credentials(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            SpotifyClientConfig.from_env(clean_env)

        assert "SPOTIFY_CLIENT_ID" in str(exc_info.value)
        assert "SPOTIFY_CLIENT_SECRET" in str(exc_info.value)

    @pytest.mark.parametrize("raw_timeout", ["soon", "0", "-3", "-1", "inf", "-inf", "nan"])
    def test_invalid_timeout(self, monkeypatch, clean_env, raw_timeout):
        # Arrange
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "client-456")
        monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "secret-789")
        monkeypatch.setenv("SPOTIFY_HTTP_TIMEOUT", raw_timeout)

        # Act & Assert
        with pytest.raises(ConfigurationError, match="SPOTIFY_HTTP_TIMEOUT"):
            SpotifyClientConfig.from_env(clean_env)

    def test_loads_dotenv_file(self, clean_env, tmp_path):
        # Arrange
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text(
            "SPOTIFY_CLIENT_ID=file-client\nSPOTIFY_CLIENT_SECRET=file-secret\n"
        )

        # Act
        config = SpotifyClientConfig.from_env(dotenv_file)

        # Assert
        assert config.client_id == "file-client"
        assert config.client_secret == "file-secret"

    def test_environment_wins_over_dotenv_file(self, monkeypatch, clean_env, tmp_path):
        # Arrange
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "env-client")
        monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "env-secret")
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text(
            "SPOTIFY_CLIENT_ID=file-client\nSPOTIFY_CLIENT_SECRET=file-secret\n"
        )

        # Act
        config = SpotifyClientConfig.from_env(dotenv_file)

        # Assert
        assert config.client_id == "env-client"


class TestSpotifyClientConfig:
    def test_secret_not_in_repr(self):
        config = SpotifyClientConfig(client_id="client-456", client_secret="secret-789")

        assert "secret-789" not in repr(config)

    def test_to_token_request(self):
        # Arrange
        config = SpotifyClientConfig(
            client_id="client-456",
            client_secret="secret-789",
            token_endpoint="https://auth.example.com/token",
        )

        # Act
        token_request = config.to_token_request(scope="catalog-read")

        # Assert
        assert token_request.client_id == "client-456"
        assert token_request.client_secret == "secret-789"
        assert token_request.token_endpoint == "https://auth.example.com/token"
        assert token_request.to_form_data() == {
            "grant_type": "client_credentials",
            "scope": "catalog-read",
        }


class TestConfiguredAuthorizationFlow:
    def test_start_authorization_flow_uses_configured_values(self):
        # Arrange
        config = SpotifyClientConfig(
            client_id="client-456",
            client_secret="secret-789",
            authorization_endpoint="https://auth.example.com/authorize",
            redirect_uri="http://127.0.0.1:8888/callback",
        )

        # Act
        auth_url, pkce_params, state = config.start_authorization_flow(scope="user-read-email")

        # Assert
        parsed = urlparse(auth_url)
        query_params = parse_qs(parsed.query)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == (
            "https://auth.example.com/authorize"
        )
        assert query_params["client_id"] == ["client-456"]
        assert query_params["redirect_uri"] == ["http://127.0.0.1:8888/callback"]
        assert query_params["scope"] == ["user-read-email"]
        assert query_params["state"] == [state]
        assert query_params["code_challenge"] == [pkce_params.code_challenge]
        assert "secret-789" not in auth_url

    def test_start_authorization_flow_requires_redirect_uri(self):
        # Arrange
        config = SpotifyClientConfig(client_id="client-456", client_secret="secret-789")

        # Act & Assert
        with pytest.raises(ConfigurationError, match="SPOTIFY_REDIRECT_URI"):
            config.start_authorization_flow()

    def test_to_flow_manager_uses_authorization_endpoint(self):
        # Arrange
        config = SpotifyClientConfig(
            client_id="client-456",
            client_secret="secret-789",
            authorization_endpoint="https://auth.example.com/authorize",
        )

        # Act
        flow_manager = config.to_flow_manager()

        # Assert
        assert flow_manager.authorization_endpoint == "https://auth.example.com/authorize"

    def test_from_env_feeds_the_authorization_flow(self, monkeypatch, clean_env):
        # Arrange
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "client-456")
        monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "secret-789")
        monkeypatch.setenv("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:8888/callback")

        # Act
        auth_url, _, _ = SpotifyClientConfig.from_env(clean_env).start_authorization_flow()

        # Assert
        assert auth_url.startswith(f"{SPOTIFY_AUTHORIZE_URL}?")
        assert parse_qs(urlparse(auth_url).query)["redirect_uri"] == [
            "http://127.0.0.1:8888/callback"
        ]
