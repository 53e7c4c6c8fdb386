"""AI provider adapters."""

from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.providers.registry import (
    ProviderRegistry,
    get_provider_registry,
    register_builtin_providers,
)

__all__ = [
    "BaseProvider",
    "Model",
    "ProviderCapabilities",
    "ProviderRegistry",
    "get_provider_registry",
    "register_builtin_providers",
]
