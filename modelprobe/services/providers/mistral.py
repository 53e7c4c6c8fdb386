"""Mistral AI provider.

Probes seven endpoints. POST probes send real request bodies; a 400 answer
still proves the endpoint exists (e.g. the account lacks the model), so POST
endpoints accept 2xx or 400 but must return a body. Validation fails as a
whole when not a single endpoint works.
"""

import logging
from typing import Any, List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.providers.openai import unix_to_iso
from modelprobe.services.validation.probes import JSONProbe, ProbeStrategy, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

MISTRAL_BASE_URL = "https://api.mistral.ai/v1"

_CATEGORY_PATTERNS = (
    ("coding", ("labs-devstral", "devstral", "codestral", "magistral", "mistral-code")),
    ("chat", ("mistral-small", "mistral-medium", "mistral-large", "ministral", "pixtral")),
    ("embedding", ("embed",)),
    ("audio", ("voxtral",)),
)

_DESCRIPTIONS = (
    ("mistral-large", "Top-tier reasoning model for complex, high-value tasks"),
    ("mistral-medium", "Ideal for intermediate tasks requiring moderate reasoning"),
    ("mistral-small", "Cost-efficient model for simple tasks"),
    ("codestral", "Specialized model for code generation and completion"),
    ("embed", "Model for generating text embeddings"),
)


def guess_categories(model_id: str) -> List[str]:
    """Categorise a Mistral model from its id (``general`` when nothing matches)."""
    categories = [
        category
        for category, patterns in _CATEGORY_PATTERNS
        if any(pattern in model_id for pattern in patterns)
    ]
    return categories or ["general"]


def describe(model_id: str) -> str:
    for pattern, description in _DESCRIPTIONS:
        if pattern in model_id:
            return description
    return "Mistral AI language model"


def _capability_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class MistralProvider(BaseProvider):
    """Mistral La Plateforme provider."""

    DEFAULT_BASE_URL = MISTRAL_BASE_URL
    DEFAULT_TIMEOUT_S = 30.0
    API_KEY_ENV = "MISTRAL_API_KEY"

    probe_strategy = JSONProbe(policy=StatusPolicy.SUCCESS, decode_json=True)
    post_probe_strategy = JSONProbe(
        policy=StatusPolicy.SUCCESS_OR_BAD_REQUEST,
        decode_json=True,
        require_body=True,
    )
    fail_if_all_failed = True

    @property
    def name(self) -> str:
        return "mistral"

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint("GET", "/models", "List available models"),
            self.endpoint(
                "POST",
                "/chat/completions",
                "Chat completion endpoint",
                test_params={
                    "model": "mistral-small-latest",
                    "messages": [{"role": "user", "content": "Hello"}],
                    "max_tokens": 10,
                },
            ),
            self.endpoint(
                "POST",
                "/fim/completions",
                "Fill-in-the-middle code completion",
                test_params={
                    "model": "codestral-latest",
                    "prompt": "def hello():",
                    "suffix": "    print('Hello')",
                    "max_tokens": 10,
                },
            ),
            self.endpoint("GET", "/agents", "List agents"),
            self.endpoint(
                "POST",
                "/embeddings",
                "Create embeddings",
                test_params={"model": "mistral-embed", "input": "Test embedding"},
            ),
            self.endpoint("GET", "/files", "List uploaded files"),
            self.endpoint("GET", "/fine_tuning/jobs", "List fine-tuning jobs"),
        ]

    def strategy_for(self, endpoint: Endpoint) -> ProbeStrategy:
        if endpoint.method.upper() == "POST":
            return self.post_probe_strategy
        return self.probe_strategy

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)

        models = []
        for item in data.get("data", []):
            model_id = item["id"]
            raw_capabilities = item.get("capabilities") or {}
            model = Model(
                id=model_id,
                name=item.get("name") or model_id,
                description=item.get("description") or describe(model_id),
                created_at=unix_to_iso(item.get("created")),
                context_window=item.get("max_context_length") or 0,
                supports_images=bool(raw_capabilities.get("vision")),
                supports_tools=bool(raw_capabilities.get("function_calling")),
                can_stream=bool(raw_capabilities.get("completion_chat")),
                deprecated=bool(item.get("deprecation")),
                categories=guess_categories(model_id),
                capabilities={k: _capability_value(v) for k, v in raw_capabilities.items()},
            )
            if model.supports_images:
                model.capabilities["vision"] = "high"
            if model.supports_tools:
                model.capabilities["function_calling"] = "full"
            models.append(model)

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} models for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_chat=True,
            supports_fim=True,
            supports_embeddings=True,
            supports_fine_tuning=True,
            supports_agents=True,
            supports_file_upload=True,
            supports_streaming=True,
            supports_json_mode=True,
            supports_vision=True,
            supports_audio=True,
            supported_parameters=[
                "model", "messages", "temperature", "top_p", "max_tokens",
                "min_tokens", "stream", "stop", "random_seed", "response_format",
                "tools", "tool_choice", "safe_prompt", "presence_penalty",
                "frequency_penalty", "n",
            ],
            security_features=["safe_prompt", "content_filtering"],
            max_requests_per_minute=60,
            max_tokens_per_request=200000,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        await self._request_json(
            "POST",
            "/chat/completions",
            ctx,
            json={
                "model": model_id,
                "messages": [{"role": "user", "content": "Say 'test'"}],
                "max_tokens": 5,
            },
        )
        if verbose:
            logger.info(f"Model {model_id} is working")
