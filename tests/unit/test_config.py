"""Unit tests for configuration loading and validation."""

import pytest
from pathlib import Path
from pydantic import ValidationError

from jamendo.common.config import (
    HTTPConfig,
    JamendoConfig,
    LoggingConfig,
    RetryConfig,
)
from jamendo.core.exceptions import ConfigurationError


class TestRetryConfig:
    """Tests for RetryConfig model."""

    def test_default_values(self):
        """Test default retry configuration values."""
        config = RetryConfig()
        assert config.max_attempts == 3
        assert config.backoff_multiplier == 1.0
        assert 500 in config.status_codes
        assert 503 in config.status_codes

    def test_invalid_status_code(self):
        """Test validation of invalid status codes."""
        with pytest.raises(ValidationError):
            RetryConfig(status_codes=[999])

    def test_validation_constraints(self):
        """Test field validation constraints."""
        with pytest.raises(ValidationError):
            RetryConfig(max_attempts=0)

        with pytest.raises(ValidationError):
            RetryConfig(max_attempts=20)


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_level_validation(self):
        """Test log level is normalized and validated."""
        assert LoggingConfig(level="debug").level == "DEBUG"

        with pytest.raises(ValidationError):
            LoggingConfig(level="INVALID")

    def test_format_validation(self):
        """Test log format is normalized and validated."""
        assert LoggingConfig(format="TEXT").format == "text"

        with pytest.raises(ValidationError):
            LoggingConfig(format="xml")


class TestJamendoConfig:
    """Tests for the main JamendoConfig model."""

    def test_defaults(self):
        """Test default API location and retry flag."""
        config = JamendoConfig(client_id="abc")
        assert config.client_secret is None
        assert config.version == "v3.0"
        assert config.retry is True
        assert config.api_url == "https://api.jamendo.com/v3.0"

    @pytest.mark.parametrize("client_id", ["", "   "])
    def test_blank_client_id_rejected(self, client_id):
        """Test that a blank client id is a configuration error."""
        with pytest.raises(ConfigurationError, match="client_id"):
            JamendoConfig(client_id=client_id)

    @pytest.mark.parametrize("client_id", ["", "   "])
    def test_from_dict_blank_client_id(self, client_id):
        """Test blank and whitespace client ids are rejected when loading."""
        with pytest.raises(ConfigurationError, match="client_id"):
            JamendoConfig.from_dict({"client_id": client_id})

    def test_from_dict_strips_client_id(self):
        """Test surrounding whitespace is removed from the client id."""
        assert JamendoConfig.from_dict({"client_id": "  abc \n"}).client_id == "abc"

    def test_from_dict_wrong_client_id_type(self):
        """Test a non-string client id is reported as a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            JamendoConfig.from_dict({"client_id": 12345})

        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_api_url_normalizes_slashes(self):
        """Test base_url and version are joined with a single slash."""
        config = JamendoConfig(
            client_id="abc", base_url="http://localhost:8080/", version="/v3.0/"
        )
        assert config.api_url == "http://localhost:8080/v3.0"

    def test_effective_http_config_with_retry(self):
        """Test retry enabled keeps the configured attempts."""
        config = JamendoConfig(
            client_id="abc", http=HTTPConfig(retry=RetryConfig(max_attempts=5))
        )
        assert config.effective_http_config().retry.max_attempts == 5

    def test_effective_http_config_without_retry(self):
        """Test retry disabled collapses to one attempt without touching the original."""
        config = JamendoConfig(
            client_id="abc",
            retry=False,
            http=HTTPConfig(timeout=12, retry=RetryConfig(max_attempts=5)),
        )
        effective = config.effective_http_config()
        assert effective.retry.max_attempts == 1
        assert effective.timeout == 12
        assert config.http.retry.max_attempts == 5

    def test_from_dict_requires_client_id(self):
        """Test missing client id raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            JamendoConfig.from_dict({"client_secret": "x"})

    def test_from_env(self, monkeypatch):
        """Test configuration from environment variables only."""
        monkeypatch.setenv("JAMENDO_CLIENT_ID", "env-id")
        monkeypatch.setenv("JAMENDO_CLIENT_SECRET", "env-secret")
        monkeypatch.setenv("JAMENDO_API_VERSION", "v3.1")

        config = JamendoConfig.from_env()
        assert config.client_id == "env-id"
        assert config.client_secret == "env-secret"
        assert config.api_url == "https://api.jamendo.com/v3.1"

    def test_from_env_without_client_id(self):
        """Test from_env fails clearly when nothing is configured."""
        with pytest.raises(ConfigurationError, match="client_id"):
            JamendoConfig.from_env()

    def test_from_yaml_string(self):
        """Test loading nested settings from YAML."""
        config = JamendoConfig.from_yaml_string(
            """
client_id: yaml-id
retry: false
http:
  timeout: 7
  retry:
    max_attempts: 2
logging:
  level: debug
  format: text
"""
        )
        assert config.client_id == "yaml-id"
        assert config.retry is False
        assert config.http.timeout == 7
        assert config.http.retry.max_attempts == 2
        assert config.logging.level == "DEBUG"

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch):
        """Test environment variables take precedence over file values."""
        path = tmp_path / "jamendo.yaml"
        path.write_text("client_id: file-id\nclient_secret: file-secret\n")
        monkeypatch.setenv("JAMENDO_CLIENT_ID", "env-id")

        config = JamendoConfig.from_yaml(path)
        assert config.client_id == "env-id"
        assert config.client_secret == "file-secret"

    def test_from_yaml_missing_file(self, tmp_path: Path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            JamendoConfig.from_yaml(tmp_path / "missing.yaml")
