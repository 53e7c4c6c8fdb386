"""Anthropic Claude provider."""

import logging
from typing import Dict, List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.providers.catalog import PricingRule, apply_rule, match_rule
from modelprobe.services.providers.openai import TEST_PROMPT
from modelprobe.services.validation.probes import JSONProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"
PROBE_MODEL = "claude-sonnet-4-5-20250929"

_CLAUDE = dict(supports_images=True, supports_tools=True, can_reason=True)

# Substring matched, first hit wins
ANTHROPIC_PRICING = (
    PricingRule("opus-4", 5.00, 25.00, 200000, 64000, categories=("chat", "reasoning", "premium"), **_CLAUDE),
    PricingRule("sonnet-4", 3.00, 15.00, 200000, 64000, categories=("chat", "reasoning", "balanced"), **_CLAUDE),
    PricingRule("haiku-4", 1.00, 5.00, 200000, 64000, categories=("chat", "fast", "cost-effective"), **_CLAUDE),
    PricingRule("opus-3.5", 15.00, 75.00, 200000, 4096, categories=("chat", "premium", "legacy"), **_CLAUDE),
    PricingRule("sonnet-3.5", 3.00, 15.00, 200000, 8192, categories=("chat", "balanced", "legacy"), **_CLAUDE),
    PricingRule("haiku-3.5", 0.80, 4.00, 200000, 4096, categories=("chat", "fast", "legacy"), **_CLAUDE),
    PricingRule("", 3.00, 15.00, 200000, 4096, categories=("chat",), **_CLAUDE),
)

_CLAUDE_CAPABILITIES = {
    "vision": "high",
    "function_calling": "full",
    "json_mode": "supported",
    "streaming": "supported",
    "extended_thinking": "supported",
}


class AnthropicProvider(BaseProvider):
    """Anthropic Messages API provider."""

    DEFAULT_BASE_URL = ANTHROPIC_BASE_URL
    DEFAULT_TIMEOUT_S = 30.0
    API_KEY_ENV = "ANTHROPIC_API_KEY"

    probe_strategy = JSONProbe(policy=StatusPolicy.SUCCESS)

    @property
    def name(self) -> str:
        return "anthropic"

    def auth_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint(
                "POST",
                "/messages",
                "Create a message",
                test_params={
                    "model": PROBE_MODEL,
                    "max_tokens": 10,
                    "messages": [{"role": "user", "content": "Hi"}],
                },
            ),
            self.endpoint("GET", "/models", "List available models"),
        ]

    def enrich_model(self, model: Model) -> Model:
        apply_rule(model, match_rule(model.id, ANTHROPIC_PRICING))
        model.can_stream = True
        model.capabilities = dict(_CLAUDE_CAPABILITIES)
        return model

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)

        models = []
        for item in data.get("data", []):
            created_at = item.get("created_at", "")
            model = Model(
                id=item["id"],
                name=item.get("display_name") or item["id"],
                description=(
                    f"Anthropic Claude model created at {created_at[:10]}" if created_at else ""
                ),
                created_at=created_at,
            )
            models.append(self.enrich_model(model))

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} models for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_chat=True,
            supports_agents=True,
            supports_file_upload=True,
            supports_streaming=True,
            supports_json_mode=True,
            supports_vision=True,
            supported_parameters=["temperature", "max_tokens", "top_p", "top_k", "stop_sequences"],
            security_features=["prompt_caching", "batch_api", "extended_thinking"],
            max_requests_per_minute=50,
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
            "/messages",
            ctx,
            json={
                "model": model_id,
                "max_tokens": 10,
                "messages": [{"role": "user", "content": TEST_PROMPT}],
            },
        )
        if verbose:
            logger.info(f"Model {model_id} is working")
