"""Provider registry.

Maps provider names to constructors. Registration is explicit: built-in
providers are added by ``register_builtin_providers`` rather than as an
import side effect, so a registry can be built with any subset of providers.

Usage:
    registry = get_provider_registry()
    provider = registry.create("openai")          # key from the environment
    provider = registry.create("midjourney", api_key="...")
"""

import os
from typing import Any, Callable, Dict, List, Optional

from modelprobe.core.config import ProviderSettings
from modelprobe.core.exceptions import ConfigurationError, NotFoundError
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider

logger = get_logger(__name__)

ProviderFactory = Callable[..., BaseProvider]

# Extra environment variables accepted as API key, after the conventional one
_KEY_ALIASES = {
    "google": ("GEMINI_API_KEY",),
}


class ProviderRegistry:
    """Explicit name -> factory map."""

    def __init__(self):
        self._factories: Dict[str, ProviderFactory] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        """Register a factory.

        Raises:
            ValueError: A provider with that name is already registered
        """
        key = name.lower()
        if key in self._factories:
            raise ValueError(f"Provider already registered: {name}")
        self._factories[key] = factory

    def get(self, name: str) -> Optional[ProviderFactory]:
        return self._factories.get(name.lower())

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def resolve_api_key(self, name: str, explicit: Optional[str] = None) -> str:
        """Find the API key for a provider.

        Order: explicit argument, PROVIDER_<NAME>_API_KEY, then the vendor's
        conventional variable (and its aliases). Empty string when none is set.
        """
        if explicit:
            return explicit

        overrides = ProviderSettings.for_provider(name)
        if overrides.api_key:
            return overrides.api_key

        factory = self.get(name)
        env_names = []
        if factory is not None and getattr(factory, "API_KEY_ENV", ""):
            env_names.append(factory.API_KEY_ENV)
        env_names.extend(_KEY_ALIASES.get(name.lower(), ()))
        for env_name in env_names:
            value = os.getenv(env_name)
            if value:
                return value
        return ""

    def create(self, name: str, api_key: Optional[str] = None, **kwargs: Any) -> BaseProvider:
        """Instantiate a provider.

        Base URL and timeout overrides are read from PROVIDER_<NAME>_BASE_URL
        and PROVIDER_<NAME>_TIMEOUT_S unless passed explicitly.

        Raises:
            NotFoundError: Unknown provider name
            ConfigurationError: No API key could be resolved
        """
        factory = self.get(name)
        if factory is None:
            raise NotFoundError("Provider", name)

        key = self.resolve_api_key(name, api_key)
        if not key:
            raise ConfigurationError(f"No API key configured for provider '{name.lower()}'")

        overrides = ProviderSettings.for_provider(name)
        if overrides.base_url and "base_url" not in kwargs:
            kwargs["base_url"] = overrides.base_url
        if overrides.timeout_s and "timeout" not in kwargs:
            kwargs["timeout"] = overrides.timeout_s

        logger.debug(f"Creating provider {name.lower()}")
        return factory(key, **kwargs)


def register_builtin_providers(registry: ProviderRegistry) -> ProviderRegistry:
    """Register the built-in providers."""
    # Import here to avoid circular imports
    from modelprobe.services.providers.anthropic import AnthropicProvider
    from modelprobe.services.providers.cerebras import CerebrasProvider
    from modelprobe.services.providers.cohere_embeddings import CohereEmbeddingsProvider
    from modelprobe.services.providers.deepgram import DeepgramProvider
    from modelprobe.services.providers.deepseek import DeepSeekProvider
    from modelprobe.services.providers.elevenlabs import ElevenLabsProvider
    from modelprobe.services.providers.fal import FALProvider
    from modelprobe.services.providers.google import GoogleProvider
    from modelprobe.services.providers.midjourney import MidjourneyProvider
    from modelprobe.services.providers.mistral import MistralProvider
    from modelprobe.services.providers.openai import OpenAIProvider
    from modelprobe.services.providers.openai_audio import TTSProvider, WhisperProvider
    from modelprobe.services.providers.openai_embeddings import EmbeddingsProvider
    from modelprobe.services.providers.openai_realtime import RealtimeProvider
    from modelprobe.services.providers.playht import PlayHTProvider
    from modelprobe.services.providers.video import LumaAIProvider, RunwayMLProvider
    from modelprobe.services.providers.voyageai import VoyageAIProvider

    registry.register("openai", OpenAIProvider)
    registry.register("anthropic", AnthropicProvider)
    registry.register("google", GoogleProvider)
    registry.register("mistral", MistralProvider)
    registry.register("midjourney", MidjourneyProvider)
    registry.register("runwayml", RunwayMLProvider)
    registry.register("lumaai", LumaAIProvider)
    registry.register("whisper", WhisperProvider)
    registry.register("tts", TTSProvider)
    registry.register("deepgram", DeepgramProvider)
    registry.register("elevenlabs", ElevenLabsProvider)
    registry.register("realtime", RealtimeProvider)
    registry.register("playht", PlayHTProvider)
    registry.register("voyageai", VoyageAIProvider)
    registry.register("cohere_embeddings", CohereEmbeddingsProvider)
    registry.register("embeddings", EmbeddingsProvider)
    registry.register("cerebras", CerebrasProvider)
    registry.register("deepseek", DeepSeekProvider)
    registry.register("fal", FALProvider)
    return registry


# Singleton instance
_registry: Optional[ProviderRegistry] = None


def get_provider_registry() -> ProviderRegistry:
    """Get the process-wide registry populated with the built-in providers."""
    global _registry
    if _registry is None:
        _registry = register_builtin_providers(ProviderRegistry())
    return _registry
