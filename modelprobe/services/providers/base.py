"""Abstract base class for AI provider adapters.

Every vendor adapter (OpenAI, Anthropic, Midjourney, Deepgram, ...) subclasses
BaseProvider and supplies its endpoint list, probe strategy, model listing and
model smoke test. The base class owns the HTTP client, the cached endpoint
registry and the validation entry point, so all vendors share one concurrency
and error model.

Usage:
    class AcmeProvider(BaseProvider):
        DEFAULT_BASE_URL = "https://api.acme.ai/v1"

        @property
        def name(self) -> str:
            return "acme"

        def _build_endpoints(self) -> List[Endpoint]:
            return [self.endpoint("GET", "/models", "List models")]
        ...

    provider = AcmeProvider(api_key="...")
    await provider.validate_endpoints(ProbeContext.with_timeout(10))
    for endpoint in provider.get_endpoints():
        print(endpoint.path, endpoint.status)

Contract:
    - get_endpoints() returns the same registry object on every call
    - validate_endpoints() never raises for individual endpoint failures
    - list_models() and test_model() raise ProviderError subclasses on failure
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from modelprobe.core.config import settings
from modelprobe.core.context import (
    ContextCancelledError,
    ContextDeadlineExceededError,
    ProbeContext,
)
from modelprobe.core.exceptions import (
    DecodeError,
    ProbeCancelledError,
    ProbeTimeoutError,
    RequestBuildError,
    TransportError,
    UpstreamStatusError,
)
from modelprobe.observability.logging import get_logger
from modelprobe.services.validation.probes import JSONProbe, ProbeStrategy, StatusPolicy
from modelprobe.services.validation.registry import Endpoint, EndpointRegistry
from modelprobe.services.validation.validator import EndpointValidator

logger = get_logger(__name__)


@dataclass
class Model:
    """An AI model offered by a provider.

    Costs are USD per 1M units (tokens for text models, characters for speech
    synthesis, minutes for transcription) as published by the vendor.
    """
    id: str
    name: str
    description: str = ""
    cost_per_1m_in: float = 0.0
    cost_per_1m_out: float = 0.0
    context_window: int = 0
    max_tokens: int = 0
    supports_images: bool = False
    supports_tools: bool = False
    can_reason: bool = False
    can_stream: bool = False
    created_at: str = ""
    deprecated: bool = False
    categories: List[str] = field(default_factory=list)
    capabilities: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


@dataclass
class ProviderCapabilities:
    """Static feature description of a provider."""
    supports_chat: bool = False
    supports_fim: bool = False
    supports_embeddings: bool = False
    supports_fine_tuning: bool = False
    supports_agents: bool = False
    supports_file_upload: bool = False
    supports_streaming: bool = False
    supports_json_mode: bool = False
    supports_vision: bool = False
    supports_audio: bool = False
    supported_parameters: List[str] = field(default_factory=list)
    security_features: List[str] = field(default_factory=list)
    max_requests_per_minute: int = 0
    max_tokens_per_request: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


class BaseProvider(ABC):
    """Abstract base class for provider adapters.

    Class Invariants:
        - The HTTP client is created lazily and reused until close()
        - The endpoint registry is built once and mutated only by validation
        - Credentials never leave the instance except in request headers

    Thread Safety:
        Safe for concurrent list_models()/test_model() calls. Overlapping
        validate_endpoints() calls on one instance must be serialised by the
        caller (see ProviderService).
    """

    DEFAULT_BASE_URL: str = ""
    DEFAULT_TIMEOUT_S: float = 30.0
    # Conventional environment variable holding the vendor key
    API_KEY_ENV: str = ""

    probe_strategy: ProbeStrategy = JSONProbe(policy=StatusPolicy.SUCCESS)
    # Fail validation when no endpoint works at all
    fail_if_all_failed: bool = False

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the provider.

        Args:
            api_key: Vendor API key
            base_url: Override of DEFAULT_BASE_URL
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (tests inject httpx.MockTransport)
        """
        self.api_key = api_key
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT_S
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._endpoints: Optional[EndpointRegistry] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"

    @property
    def is_configured(self) -> bool:
        """Check if the provider has an API key."""
        return bool(self.api_key)

    # HTTP client

    def auth_headers(self) -> Dict[str, str]:
        """Credential headers sent with every request."""
        return {"Authorization": f"Bearer {self.api_key}"}

    def _auth_params(self) -> Dict[str, str]:
        """Credential query parameters sent with every request."""
        return {}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                params=self._auth_params(),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def send(
        self,
        method: str,
        path: str,
        ctx: Optional[ProbeContext] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one request under ``ctx`` and return the raw response.

        Status codes are not checked here.

        Raises:
            RequestBuildError: Request could not be constructed
            ProbeTimeoutError: Context deadline or client timeout
            ProbeCancelledError: Context cancelled
            TransportError: Any other failure to obtain a response
        """
        ctx = ctx or ProbeContext.background()
        client = await self._get_client()
        try:
            request = client.build_request(method, path, **kwargs)
        except (TypeError, ValueError, httpx.InvalidURL) as e:
            raise RequestBuildError(self.name, f"failed to create request: {e}")

        try:
            return await ctx.run(client.send(request))
        except ContextDeadlineExceededError as e:
            raise ProbeTimeoutError(self.name, f"request failed: {e}")
        except ContextCancelledError as e:
            raise ProbeCancelledError(self.name, f"request failed: {e}")
        except httpx.TimeoutException as e:
            raise ProbeTimeoutError(self.name, f"request failed: {str(e) or type(e).__name__}")
        except httpx.RequestError as e:
            raise TransportError(self.name, f"request failed: {str(e) or type(e).__name__}")

    def _check_status(self, response: httpx.Response, *accepted: int) -> None:
        """Raise UpstreamStatusError unless the status is accepted (default 2xx)."""
        ok = response.status_code in accepted if accepted else response.is_success
        if not ok:
            logger.debug(
                f"{self.name} returned HTTP {response.status_code} for "
                f"{response.request.method} {response.request.url.path}"
            )
            raise UpstreamStatusError(self.name, response.status_code, response.text)

    def _decode_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(self.name, f"failed to decode response: {e}")

    async def _request_json(
        self,
        method: str,
        path: str,
        ctx: Optional[ProbeContext] = None,
        **kwargs: Any,
    ) -> Any:
        """Authenticated request expecting a 2xx JSON response."""
        headers = self.auth_headers()
        headers.update(kwargs.pop("headers", None) or {})
        response = await self.send(method, path, ctx, headers=headers, **kwargs)
        self._check_status(response)
        return self._decode_json(response)

    # Endpoint registry

    def endpoint(
        self,
        method: str,
        path: str,
        description: str,
        test_params: Optional[Dict[str, Any]] = None,
        critical: bool = False,
    ) -> Endpoint:
        """Declare an endpoint carrying this provider's credentials."""
        return Endpoint(
            path=path,
            method=method,
            description=description,
            headers=self.auth_headers(),
            test_params=test_params,
            critical=critical,
        )

    @abstractmethod
    def _build_endpoints(self) -> List[Endpoint]:
        """Vendor-specific endpoint list."""
        pass

    def get_endpoints(self) -> EndpointRegistry:
        """Return the cached endpoint registry, building it on first use."""
        if self._endpoints is None:
            self._endpoints = EndpointRegistry(self._build_endpoints())
        return self._endpoints

    # Validation

    def strategy_for(self, endpoint: Endpoint) -> ProbeStrategy:
        """Probe strategy for an endpoint (one strategy per provider by default)."""
        return self.probe_strategy

    async def probe_endpoint(self, endpoint: Endpoint, ctx: ProbeContext) -> None:
        """Probe a single endpoint, raising ProviderError on failure."""
        await self.strategy_for(endpoint).probe(self, endpoint, ctx)

    async def validate_endpoints(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        """Probe every endpoint concurrently and record the results in place.

        Args:
            ctx: Deadline/cancellation shared by all probes
                 (default: VALIDATION_TIMEOUT_S from settings)
            verbose: Log progress at INFO

        Raises:
            CriticalEndpointError: An endpoint marked critical failed
            AllEndpointsFailedError: fail_if_all_failed is set and no endpoint works
        """
        if ctx is None:
            ctx = ProbeContext.with_timeout(settings.VALIDATION_TIMEOUT_S)
        validator = EndpointValidator(
            self.name,
            self.get_endpoints(),
            self.probe_endpoint,
            fail_if_all_failed=self.fail_if_all_failed,
        )
        await validator.run(ctx, verbose)

    # Models

    @abstractmethod
    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        """
        List models with enriched metadata.

        Raises:
            ProviderError: Listing request failed
        """
        pass

    @abstractmethod
    def get_capabilities(self) -> ProviderCapabilities:
        """Static capability description."""
        pass

    @abstractmethod
    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        """
        Send one minimal request exercising ``model_id``.

        Raises:
            ProviderError: Request failed or was rejected
        """
        pass
