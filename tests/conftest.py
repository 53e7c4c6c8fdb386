"""Pytest configuration and fixtures."""

import json
import os
from typing import AsyncGenerator, Callable, List, Optional

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Set testing environment before importing app
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOG_FORMAT"] = "text"
os.environ["PROVIDERS"] = ""

from modelprobe.core.context import ProbeContext  # noqa: E402
from modelprobe.services.providers.base import (  # noqa: E402
    BaseProvider,
    Model,
    ProviderCapabilities,
)
from modelprobe.services.validation.probes import JSONProbe, StatusPolicy  # noqa: E402
from modelprobe.services.validation.registry import Endpoint  # noqa: E402


# =============================================================================
# Stub Provider
# =============================================================================


class StubProvider(BaseProvider):
    """Minimal provider talking to an in-process httpx.MockTransport."""

    DEFAULT_BASE_URL = "https://stub.test/v1"
    API_KEY_ENV = "STUB_API_KEY"

    probe_strategy = JSONProbe(policy=StatusPolicy.SUCCESS)

    def __init__(self, api_key: str, endpoints: Optional[List[Endpoint]] = None, **kwargs):
        super().__init__(api_key, **kwargs)
        self._endpoint_override = endpoints
        self.build_count = 0

    @property
    def name(self) -> str:
        return "stub"

    def _build_endpoints(self) -> List[Endpoint]:
        self.build_count += 1
        if self._endpoint_override is not None:
            return self._endpoint_override
        return [
            self.endpoint("GET", "/models", "List models"),
            self.endpoint("POST", "/imagine", "Generate", test_params={"prompt": "test"}),
            self.endpoint("GET", "/status/{id}", "Generation status"),
        ]

    async def list_models(self, ctx: Optional[ProbeContext] = None, verbose: bool = False) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)
        return [Model(id=item["id"], name=item["id"]) for item in data.get("data", [])]

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(supports_chat=True, supported_parameters=["prompt"])

    async def test_model(self, model_id: str, ctx: Optional[ProbeContext] = None, verbose: bool = False) -> None:
        await self._request_json("POST", "/chat", ctx, json={"model": model_id})


def stub_api(request: httpx.Request) -> httpx.Response:
    """Fake upstream: models and generation work, status polling is unauthorized."""
    path = request.url.path
    if request.method == "GET" and path == "/v1/models":
        return httpx.Response(
            200,
            json={"data": [{"id": "stub-small", "created": 1700000000}, {"id": "stub-large"}]},
        )
    if request.method == "POST" and path == "/v1/imagine":
        return httpx.Response(200, json={"id": "gen-1"})
    if request.method == "GET" and path == "/v1/status/test-id":
        return httpx.Response(401, json={"error": "unauthorized"})
    if request.method == "POST" and path == "/v1/chat":
        body = json.loads(request.content)
        if body.get("model") == "broken":
            return httpx.Response(500, text="model unavailable")
        return httpx.Response(200, json={"ok": True})
    return httpx.Response(404, json={"error": "not found"})


@pytest.fixture
def stub_provider_cls():
    """The StubProvider class."""
    return StubProvider


@pytest.fixture
def make_provider() -> Callable[..., StubProvider]:
    """Factory building a StubProvider bound to a MockTransport handler."""

    def _make(handler=stub_api, endpoints=None, **kwargs) -> StubProvider:
        provider = StubProvider(
            "sk-test",
            endpoints=endpoints,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
        return provider

    return _make


# =============================================================================
# App and Client Fixtures
# =============================================================================


@pytest.fixture
def stub_registry(monkeypatch):
    """Provider registry holding only the stub provider, with a key configured."""
    from modelprobe.services.providers.registry import ProviderRegistry

    monkeypatch.setenv("STUB_API_KEY", "sk-test")
    registry = ProviderRegistry()
    registry.register("stub", StubProvider)
    return registry


@pytest_asyncio.fixture
async def provider_service(stub_registry):
    """ProviderService over the stub registry using the fake upstream."""
    from modelprobe.services.provider_service import ProviderService, reset_provider_service

    service = ProviderService(registry=stub_registry, transport=httpx.MockTransport(stub_api))
    reset_provider_service(service)
    yield service
    await service.close_all()
    reset_provider_service(None)


@pytest_asyncio.fixture
async def app() -> FastAPI:
    """Create FastAPI app for testing."""
    from modelprobe.main import app as fastapi_app
    return fastapi_app


@pytest_asyncio.fixture
async def client(app: FastAPI, provider_service) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
