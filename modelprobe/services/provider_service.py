"""Provider service: process-wide cache of provider instances.

This service provides:
- One provider instance per name, created on first use
- Serialised validation runs per provider instance
- Model listing and smoke tests with metrics
- Shutdown of every HTTP client
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from modelprobe.core.config import settings
from modelprobe.core.context import ProbeContext
from modelprobe.core.exceptions import (
    AllEndpointsFailedError,
    ConfigurationError,
    CriticalEndpointError,
    ModelProbeException,
    NotFoundError,
)
from modelprobe.observability.logging import LogContext, get_logger
from modelprobe.observability.metrics import metrics
from modelprobe.services.providers.base import BaseProvider, Model
from modelprobe.services.providers.registry import ProviderRegistry, get_provider_registry
from modelprobe.services.validation.registry import EndpointRegistry

logger = get_logger(__name__)


@dataclass
class ModelTestResult:
    """Outcome of a model smoke test."""

    provider: str
    model_id: str
    success: bool
    message: str
    latency_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "model_id": self.model_id,
            "success": self.success,
            "message": self.message,
            "latency_ms": self.latency_ms,
        }


class ProviderService:
    """Caches provider instances and runs operations against them.

    A provider instance is not safe for overlapping validation runs, so each
    name gets its own asyncio.Lock held for the duration of a run.
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.registry = registry or get_provider_registry()
        self._transport = transport
        self._providers: Dict[str, BaseProvider] = {}
        self._validation_locks: Dict[str, asyncio.Lock] = {}

    def available(self) -> List[str]:
        """Provider names exposed by this service (PROVIDERS setting, default all)."""
        names = self.registry.names()
        enabled = settings.providers_list
        if enabled:
            names = [name for name in names if name in enabled]
        return names

    def _check_available(self, name: str) -> str:
        key = name.lower()
        if key not in self.registry or key not in self.available():
            raise NotFoundError("Provider", name)
        return key

    def get_provider(self, name: str) -> BaseProvider:
        """Get or create the provider instance for ``name``.

        Raises:
            NotFoundError: Unknown or disabled provider
            ConfigurationError: No API key
        """
        key = self._check_available(name)
        provider = self._providers.get(key)
        if provider is None:
            kwargs = {"transport": self._transport} if self._transport else {}
            provider = self.registry.create(key, **kwargs)
            self._providers[key] = provider
            self._validation_locks.setdefault(key, asyncio.Lock())
            logger.info(f"Provider initialized: {key}")
        return provider

    def list_configured(self) -> List[Dict[str, Any]]:
        """Every exposed provider and whether it has an API key."""
        return [
            {
                "name": name,
                "configured": bool(self.registry.resolve_api_key(name)),
                "initialized": name in self._providers,
            }
            for name in self.available()
        ]

    async def validate(
        self,
        name: str,
        timeout_s: Optional[float] = None,
        verbose: bool = False,
    ) -> Tuple[EndpointRegistry, Optional[str]]:
        """Validate a provider's endpoints.

        Returns:
            The provider's endpoint registry and the validation failure
            message (None unless a critical endpoint failed or, for providers
            with fail_if_all_failed, no endpoint worked)
        """
        provider = self.get_provider(name)
        ctx = ProbeContext.with_timeout(timeout_s or settings.VALIDATION_TIMEOUT_S)

        lock = self._validation_locks.setdefault(name.lower(), asyncio.Lock())
        async with lock:
            try:
                await provider.validate_endpoints(ctx, verbose=verbose)
            except (CriticalEndpointError, AllEndpointsFailedError) as e:
                logger.warning(f"Validation failed for {provider.name}: {e.message}")
                return provider.get_endpoints(), e.message
        return provider.get_endpoints(), None

    async def list_models(self, name: str, verbose: bool = False) -> List[Model]:
        """List a provider's models.

        Raises:
            ProviderError: Listing request failed
        """
        provider = self.get_provider(name)
        ctx = ProbeContext.with_timeout(settings.MODEL_TEST_TIMEOUT_S)
        with LogContext(provider=provider.name):
            models = await provider.list_models(ctx, verbose=verbose)
        metrics.update_models_listed(provider.name, len(models))
        return models

    async def test_model(
        self,
        name: str,
        model_id: str,
        timeout_s: Optional[float] = None,
        verbose: bool = False,
    ) -> ModelTestResult:
        """Smoke-test one model. Failures are reported, not raised."""
        provider = self.get_provider(name)
        ctx = ProbeContext.with_timeout(timeout_s or settings.MODEL_TEST_TIMEOUT_S)

        start_time = time.time()
        with LogContext(provider=provider.name, model_id=model_id):
            try:
                await provider.test_model(model_id, ctx, verbose=verbose)
                success, message = True, "Model is working"
            except ConfigurationError:
                raise
            except ModelProbeException as e:
                logger.warning(f"Model test failed for {provider.name}/{model_id}: {e.message}")
                success, message = False, e.message
        duration = time.time() - start_time

        metrics.record_model_test(provider.name, "success" if success else "failed", duration)
        return ModelTestResult(
            provider=provider.name,
            model_id=model_id,
            success=success,
            message=message,
            latency_ms=int(duration * 1000),
        )

    async def close_all(self) -> None:
        """Close every provider HTTP client."""
        for provider in self._providers.values():
            await provider.close()
        self._providers.clear()
        self._validation_locks.clear()


# Singleton instance
_service: Optional[ProviderService] = None


def get_provider_service() -> ProviderService:
    """Get the singleton provider service."""
    global _service
    if _service is None:
        _service = ProviderService()
    return _service


def reset_provider_service(service: Optional[ProviderService] = None) -> None:
    """Replace the singleton (used by tests and on shutdown)."""
    global _service
    _service = service
