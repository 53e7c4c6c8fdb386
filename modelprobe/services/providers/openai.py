"""OpenAI chat provider.

Endpoints probed: chat completions, model listing and embeddings. Model
listings are filtered down to chat/reasoning models and enriched from a
prefix-matched pricing table.

Configuration:
    - OPENAI_API_KEY or PROVIDER_OPENAI_API_KEY: API key
    - PROVIDER_OPENAI_BASE_URL: Base URL override
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.providers.catalog import PricingRule, apply_rule, match_rule
from modelprobe.services.validation.probes import JSONProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"

# Prompt used by chat smoke tests across vendors
TEST_PROMPT = "Say 'test successful' in 2 words"

_OPENAI_CAPABILITIES = {
    "function_calling": "full",
    "json_mode": "supported",
    "streaming": "supported",
}

# Prefix matched, first hit wins
OPENAI_PRICING = (
    PricingRule("gpt-4o-mini", 0.15, 0.60, 128000, 16384, supports_images=True,
                categories=("chat", "fast", "cost-effective", "vision")),
    PricingRule("gpt-4o", 2.50, 10.00, 128000, 16384, supports_images=True, can_reason=True,
                categories=("chat", "multimodal", "vision", "premium")),
    PricingRule("gpt-4-turbo", 10.00, 30.00, 128000, 4096, can_reason=True,
                categories=("chat", "premium", "legacy")),
    PricingRule("gpt-4", 30.00, 60.00, 8192, 4096, can_reason=True,
                categories=("chat", "premium", "legacy")),
    PricingRule("gpt-3.5-turbo-instruct", 1.50, 2.00, 4096, 4096,
                categories=("completion", "legacy")),
    PricingRule("gpt-3.5-turbo", 0.50, 1.50, 16385, 4096,
                categories=("chat", "cost-effective", "legacy")),
    PricingRule("o1-mini", 3.00, 12.00, 128000, 65536, can_reason=True,
                categories=("reasoning", "problem-solving", "fast")),
    PricingRule("o1", 15.00, 60.00, 128000, 100000, can_reason=True,
                categories=("reasoning", "problem-solving", "premium")),
    PricingRule("o3", 20.00, 80.00, 128000, 100000, supports_images=True, can_reason=True,
                categories=("reasoning", "multimodal", "premium")),
    PricingRule("", 1.00, 2.00, 8192, 4096, categories=("chat",)),
)

# Non-chat model families excluded from listings
_SKIP_PREFIXES = (
    "text-embedding", "embedding",
    "whisper", "tts",
    "text-moderation",
    "dall-e", "davinci-edit", "babbage-edit",
)


def is_usable_model(model_id: str) -> bool:
    """Check if a model id is a chat or reasoning model."""
    if model_id.startswith(_SKIP_PREFIXES):
        return False
    if "davinci" in model_id and "gpt" not in model_id:
        return False
    if "curie" in model_id or "babbage" in model_id or "ada" in model_id:
        return False
    return True


def format_model_name(model_id: str) -> str:
    if model_id.startswith("gpt-4o"):
        return f"GPT-4 Omni: {model_id}"
    if model_id.startswith("gpt-4-turbo"):
        return f"GPT-4 Turbo: {model_id}"
    if model_id.startswith("gpt-4"):
        return f"GPT-4: {model_id}"
    if model_id.startswith("gpt-3.5"):
        return f"GPT-3.5: {model_id}"
    if model_id.startswith(("o1", "o3")):
        return f"O-Series Reasoning: {model_id}"
    return model_id


def unix_to_iso(timestamp: Optional[int]) -> str:
    if not timestamp:
        return ""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


class OpenAIProvider(BaseProvider):
    """OpenAI chat completions provider."""

    DEFAULT_BASE_URL = OPENAI_BASE_URL
    DEFAULT_TIMEOUT_S = 30.0
    API_KEY_ENV = "OPENAI_API_KEY"

    probe_strategy = JSONProbe(policy=StatusPolicy.SUCCESS, decode_json=True)

    @property
    def name(self) -> str:
        return "openai"

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint(
                "POST",
                "/chat/completions",
                "Create a chat completion",
                test_params={
                    "model": "gpt-4o-mini",
                    "max_tokens": 5,
                    "messages": [{"role": "user", "content": "Hi"}],
                },
            ),
            self.endpoint("GET", "/models", "List available models"),
            self.endpoint(
                "POST",
                "/embeddings",
                "Create embeddings",
                test_params={"model": "text-embedding-3-small", "input": ["test"]},
            ),
        ]

    def enrich_model(self, model: Model) -> Model:
        """Add pricing, context window and capability information."""
        rule = match_rule(model.id, OPENAI_PRICING, prefix=True)
        apply_rule(model, rule)
        model.supports_tools = True
        model.can_stream = True
        if model.id.startswith("gpt-4-turbo"):
            model.supports_images = "vision" in model.id or "preview" in model.id
        elif model.id.startswith("gpt-4") and not model.id.startswith("gpt-4o"):
            model.supports_images = "vision" in model.id

        model.capabilities = dict(_OPENAI_CAPABILITIES)
        if model.supports_images:
            model.capabilities["vision"] = "high"
        if model.can_reason:
            model.capabilities["reasoning"] = "advanced"
        return model

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)

        models = []
        for item in data.get("data", []):
            model_id = item.get("id", "")
            if not model_id or not is_usable_model(model_id):
                continue
            model = Model(
                id=model_id,
                name=format_model_name(model_id),
                created_at=unix_to_iso(item.get("created")),
            )
            models.append(self.enrich_model(model))

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} usable models for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_chat=True,
            supports_embeddings=True,
            supports_fine_tuning=True,
            supports_agents=True,
            supports_file_upload=True,
            supports_streaming=True,
            supports_json_mode=True,
            supports_vision=True,
            supports_audio=True,
            supported_parameters=[
                "temperature", "max_tokens", "top_p",
                "frequency_penalty", "presence_penalty", "stop",
            ],
            security_features=["moderation_endpoint", "content_filtering"],
            max_requests_per_minute=500,
            max_tokens_per_request=128000,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        data = await self._request_json(
            "POST",
            "/chat/completions",
            ctx,
            json={
                "model": model_id,
                "max_tokens": 10,
                "messages": [{"role": "user", "content": TEST_PROMPT}],
            },
        )
        if verbose and data.get("choices"):
            content = data["choices"][0].get("message", {}).get("content", "")
            logger.info(f"Model {model_id} responded: {content}")
