"""Per-vendor probe strategies.

A probe performs exactly one minimal HTTP request against an endpoint and
decides, from the status code and body, whether the endpoint works. Every
strategy carries an explicit StatusPolicy so the accepted status range is
declared next to the provider instead of being buried in the request code.

Usage:
    strategy = JSONProbe(policy=StatusPolicy.SUCCESS, decode_json=True)
    await strategy.probe(provider, endpoint, ctx)  # raises ProviderError on failure
"""

import json
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict

import httpx

from modelprobe.core.context import ProbeContext
from modelprobe.core.exceptions import DecodeError, RequestBuildError, UpstreamStatusError
from modelprobe.services.validation.audio import minimal_wav
from modelprobe.services.validation.registry import Endpoint

if TYPE_CHECKING:
    from modelprobe.services.providers.base import BaseProvider

# Substituted for ``{id}`` placeholders in probe paths
TEST_ID = "test-id"


class StatusPolicy(str, Enum):
    """Which HTTP status codes count as a working endpoint.

    Attributes:
        SUCCESS: 2xx only
        NOT_ERROR: Anything below 400
        SUCCESS_OR_BAD_REQUEST: 2xx, or 400 (endpoint exists, parameters rejected)
        REACHABLE: 2xx to 4xx (reachable, only auth or parameters rejected)
    """
    SUCCESS = "success"
    NOT_ERROR = "not_error"
    SUCCESS_OR_BAD_REQUEST = "success_or_bad_request"
    REACHABLE = "reachable"

    def accepts(self, status_code: int) -> bool:
        if self is StatusPolicy.SUCCESS:
            return 200 <= status_code < 300
        if self is StatusPolicy.NOT_ERROR:
            return status_code < 400
        if self is StatusPolicy.SUCCESS_OR_BAD_REQUEST:
            return 200 <= status_code < 300 or status_code == 400
        return 200 <= status_code < 500


class ProbeStrategy:
    """Base probe: build, send, classify.

    Attributes:
        policy: Accepted status range
        decode_json: Parse a 2xx body as JSON
        require_body: Reject an empty body regardless of status
    """

    def __init__(
        self,
        policy: StatusPolicy = StatusPolicy.SUCCESS,
        decode_json: bool = False,
        require_body: bool = False,
    ):
        self.policy = policy
        self.decode_json = decode_json
        self.require_body = require_body

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(policy={self.policy.value}, "
            f"decode_json={self.decode_json}, require_body={self.require_body})"
        )

    def request_path(self, endpoint: Endpoint) -> str:
        return endpoint.path.replace("{id}", TEST_ID)

    def request_kwargs(self, endpoint: Endpoint) -> Dict[str, Any]:
        """Extra keyword arguments for ``httpx.AsyncClient.build_request``."""
        return {}

    async def probe(
        self,
        provider: "BaseProvider",
        endpoint: Endpoint,
        ctx: ProbeContext,
    ) -> None:
        """Probe one endpoint.

        Raises:
            RequestBuildError: Request could not be constructed
            TransportError: No HTTP response (includes timeout and cancellation)
            UpstreamStatusError: Status rejected by the policy
            DecodeError: Body missing or not valid JSON
        """
        try:
            kwargs = self.request_kwargs(endpoint)
        except (TypeError, ValueError) as e:
            raise RequestBuildError(provider.name, f"failed to create request: {e}")

        headers = dict(endpoint.headers)
        headers.update(kwargs.pop("headers", {}))
        response = await provider.send(
            endpoint.method,
            self.request_path(endpoint),
            ctx,
            headers=headers,
            **kwargs,
        )
        self.classify(provider.name, response)

    def classify(self, provider_name: str, response: httpx.Response) -> None:
        """Apply the status policy and body checks to a response."""
        if self.require_body and not response.content:
            raise DecodeError(provider_name, "empty response body")

        if not self.policy.accepts(response.status_code):
            raise UpstreamStatusError(provider_name, response.status_code, response.text)

        if self.decode_json and response.is_success:
            try:
                json.loads(response.content)
            except ValueError as e:
                raise DecodeError(provider_name, f"invalid JSON response: {e}")


class SimpleGetProbe(ProbeStrategy):
    """Bodyless request, status check only."""


class JSONProbe(ProbeStrategy):
    """Sends ``endpoint.test_params`` as the JSON body of non-GET requests."""

    def request_kwargs(self, endpoint: Endpoint) -> Dict[str, Any]:
        if endpoint.method.upper() == "GET" or endpoint.test_params is None:
            return {}
        # Serialize eagerly so an unencodable body is a build error
        content = json.dumps(endpoint.test_params).encode("utf-8")
        return {
            "content": content,
            "headers": {"Content-Type": "application/json"},
        }


class GenerationProbe(JSONProbe):
    """Image/video generation request.

    Generation endpoints reject probe parameters or quota-limited accounts with
    4xx while still proving reachability, so REACHABLE is the default policy.
    """

    def __init__(
        self,
        policy: StatusPolicy = StatusPolicy.REACHABLE,
        decode_json: bool = False,
        require_body: bool = False,
    ):
        super().__init__(policy=policy, decode_json=decode_json, require_body=require_body)


class MultipartAudioProbe(ProbeStrategy):
    """Multipart upload of a minimal WAV plus the model field."""

    def __init__(
        self,
        policy: StatusPolicy = StatusPolicy.NOT_ERROR,
        model: str = "whisper-1",
        decode_json: bool = False,
        require_body: bool = False,
    ):
        super().__init__(policy=policy, decode_json=decode_json, require_body=require_body)
        self.model = model

    def request_kwargs(self, endpoint: Endpoint) -> Dict[str, Any]:
        if endpoint.method.upper() == "GET":
            return {}
        return {
            "files": {"file": ("test.wav", minimal_wav(), "audio/wav")},
            "data": {"model": self.model},
        }
