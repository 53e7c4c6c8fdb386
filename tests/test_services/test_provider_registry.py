"""Tests for the provider registry."""

import pytest

BUILTIN = [
    "anthropic", "cerebras", "cohere_embeddings", "deepgram", "deepseek", "elevenlabs",
    "embeddings", "fal", "google", "lumaai", "midjourney", "mistral", "openai", "playht",
    "realtime", "runwayml", "tts", "voyageai", "whisper",
]


@pytest.mark.unit
class TestProviderRegistry:
    """Tests for ProviderRegistry."""

    def test_builtin_providers(self):
        """Test every built-in provider is registered."""
        from modelprobe.services.providers.registry import get_provider_registry

        assert get_provider_registry().names() == BUILTIN

    def test_explicit_registration(self, stub_provider_cls):
        """Test a fresh registry only holds what was registered."""
        from modelprobe.services.providers.registry import ProviderRegistry

        registry = ProviderRegistry()
        registry.register("Stub", stub_provider_cls)

        assert len(registry) == 1
        assert "stub" in registry
        assert "STUB" in registry
        assert registry.get("stub") is stub_provider_cls

    def test_duplicate_registration(self, stub_provider_cls):
        """Test registering the same name twice fails."""
        from modelprobe.services.providers.registry import ProviderRegistry

        registry = ProviderRegistry()
        registry.register("stub", stub_provider_cls)

        with pytest.raises(ValueError, match="already registered"):
            registry.register("stub", stub_provider_cls)

    def test_create_unknown(self):
        """Test creating an unregistered provider raises NotFoundError."""
        from modelprobe.core.exceptions import NotFoundError
        from modelprobe.services.providers.registry import ProviderRegistry

        with pytest.raises(NotFoundError, match="Provider not found: acme"):
            ProviderRegistry().create("acme", api_key="k")

    def test_create_without_key(self, monkeypatch):
        """Test a missing API key is a configuration error."""
        from modelprobe.core.exceptions import ConfigurationError
        from modelprobe.services.providers.registry import get_provider_registry

        monkeypatch.delenv("DEEPGRAM_API_KEY", raising=False)
        monkeypatch.delenv("PROVIDER_DEEPGRAM_API_KEY", raising=False)

        with pytest.raises(ConfigurationError, match="No API key configured for provider 'deepgram'"):
            get_provider_registry().create("deepgram")

    def test_create_with_explicit_key(self):
        """Test an explicit key builds the adapter."""
        from modelprobe.services.providers.mistral import MistralProvider
        from modelprobe.services.providers.registry import get_provider_registry

        provider = get_provider_registry().create("Mistral", api_key="mk-1")

        assert isinstance(provider, MistralProvider)
        assert provider.api_key == "mk-1"
        assert provider.is_configured


@pytest.mark.unit
class TestApiKeyResolution:
    """Tests for API key lookup order."""

    def test_override_before_conventional(self, monkeypatch):
        """Test PROVIDER_<NAME>_API_KEY wins over the vendor variable."""
        from modelprobe.services.providers.registry import get_provider_registry

        monkeypatch.setenv("OPENAI_API_KEY", "sk-vendor")
        monkeypatch.setenv("PROVIDER_OPENAI_API_KEY", "sk-override")

        assert get_provider_registry().resolve_api_key("openai") == "sk-override"

    def test_conventional_variable(self, monkeypatch):
        """Test the vendor variable is used when no override is set."""
        from modelprobe.services.providers.registry import get_provider_registry

        monkeypatch.delenv("PROVIDER_WHISPER_API_KEY", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-vendor")

        assert get_provider_registry().resolve_api_key("whisper") == "sk-vendor"

    def test_alias_variable(self, monkeypatch):
        """Test GEMINI_API_KEY is accepted for google."""
        from modelprobe.services.providers.registry import get_provider_registry

        monkeypatch.delenv("PROVIDER_GOOGLE_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.setenv("GEMINI_API_KEY", "g-key")

        assert get_provider_registry().resolve_api_key("google") == "g-key"

    def test_base_url_and_timeout_overrides(self, monkeypatch):
        """Test base URL and timeout come from provider overrides."""
        from modelprobe.services.providers.registry import get_provider_registry

        monkeypatch.setenv("PROVIDER_ELEVENLABS_BASE_URL", "https://proxy.local/v1/")
        monkeypatch.setenv("PROVIDER_ELEVENLABS_TIMEOUT_S", "5")

        provider = get_provider_registry().create("elevenlabs", api_key="k")

        assert provider.base_url == "https://proxy.local/v1"
        assert provider.timeout == 5.0

    def test_playht_key_carries_user_id(self, monkeypatch):
        """Test the PlayHT key is split into user id and secret on creation."""
        from modelprobe.services.providers.registry import get_provider_registry

        monkeypatch.delenv("PROVIDER_PLAYHT_API_KEY", raising=False)
        monkeypatch.setenv("PLAYHT_API_KEY", "user-7:secret-9")

        provider = get_provider_registry().create("playht")

        assert provider.user_id == "user-7"
        assert provider.api_key == "secret-9"
