"""Tests for application configuration."""

import pytest


@pytest.mark.unit
class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        """Test default timeouts and observability paths."""
        from modelprobe.core.config import Settings

        monkeypatch.delenv("VALIDATION_TIMEOUT_S", raising=False)
        monkeypatch.delenv("MODEL_TEST_TIMEOUT_S", raising=False)
        settings = Settings(_env_file=None)

        assert settings.VALIDATION_TIMEOUT_S == 60.0
        assert settings.MODEL_TEST_TIMEOUT_S == 60.0
        assert settings.HEALTH_PATH == "/health"
        assert settings.METRICS_PATH == "/metrics"

    def test_providers_list(self):
        """Test PROVIDERS is split, trimmed and lowercased."""
        from modelprobe.core.config import Settings

        settings = Settings(_env_file=None, PROVIDERS=" OpenAI, mistral ,,")

        assert settings.providers_list == ["openai", "mistral"]

    def test_empty_providers_list(self):
        """Test an empty PROVIDERS means no filter."""
        from modelprobe.core.config import Settings

        assert Settings(_env_file=None, PROVIDERS="").providers_list == []

    def test_log_level_normalized(self):
        """Test LOG_LEVEL is uppercased."""
        from modelprobe.core.config import Settings

        assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_invalid_log_level(self):
        """Test an unknown LOG_LEVEL is rejected."""
        from pydantic import ValidationError

        from modelprobe.core.config import Settings

        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="verbose")

    def test_invalid_log_format(self):
        """Test LOG_FORMAT must be json or text."""
        from pydantic import ValidationError

        from modelprobe.core.config import Settings

        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_FORMAT="xml")

    def test_non_positive_timeout_rejected(self):
        """Test timeouts must be greater than zero."""
        from pydantic import ValidationError

        from modelprobe.core.config import Settings

        with pytest.raises(ValidationError):
            Settings(_env_file=None, VALIDATION_TIMEOUT_S=0)


@pytest.mark.unit
class TestProviderSettings:
    """Tests for per-provider overrides."""

    def test_reads_prefixed_variables(self, monkeypatch):
        """Test PROVIDER_<NAME>_* variables are picked up."""
        from modelprobe.core.config import ProviderSettings

        monkeypatch.setenv("PROVIDER_MISTRAL_API_KEY", "mk-123")
        monkeypatch.setenv("PROVIDER_MISTRAL_BASE_URL", "https://proxy.local/v1")
        monkeypatch.setenv("PROVIDER_MISTRAL_TIMEOUT_S", "12.5")

        overrides = ProviderSettings.for_provider("mistral")

        assert overrides.api_key == "mk-123"
        assert overrides.base_url == "https://proxy.local/v1"
        assert overrides.timeout_s == 12.5

    def test_missing_variables(self, monkeypatch):
        """Test absent overrides yield empty values."""
        from modelprobe.core.config import ProviderSettings

        for suffix in ("API_KEY", "BASE_URL", "TIMEOUT_S"):
            monkeypatch.delenv(f"PROVIDER_DEEPGRAM_{suffix}", raising=False)

        overrides = ProviderSettings.for_provider("deepgram")

        assert overrides.api_key == ""
        assert overrides.base_url is None
        assert overrides.timeout_s is None
