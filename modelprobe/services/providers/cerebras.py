"""Cerebras inference provider (OpenAI-compatible, Llama models)."""

from modelprobe.services.providers.base import Model, ProviderCapabilities
from modelprobe.services.providers.catalog import PricingRule
from modelprobe.services.providers.openai_compatible import OpenAICompatibleProvider

CEREBRAS_BASE_URL = "https://api.cerebras.ai/v1"
CEREBRAS_CONTEXT_WINDOW = 8192

CEREBRAS_PRICING = (
    PricingRule("3.3-70b", 0.60, 0.60, 8192, 8192, can_reason=True,
                categories=("chat", "ultra-fast", "reasoning")),
    PricingRule("3.1-70b", 0.60, 0.60, 8192, 8192, can_reason=True,
                categories=("chat", "ultra-fast", "reasoning")),
    PricingRule("3.1-8b", 0.10, 0.10, 8192, 8192,
                categories=("chat", "ultra-fast", "cost-effective")),
    PricingRule("", 0.60, 0.60, 8192, 8192, categories=("chat",)),
)

_DESCRIPTIONS = (
    ("3.3-70b", "Ultra-fast Llama 3.3 70B - 1800 tokens/sec"),
    ("3.1-70b", "Ultra-fast Llama 3.1 70B - 1800 tokens/sec"),
    ("3.1-8b", "Ultra-fast Llama 3.1 8B - 1800 tokens/sec"),
)


class CerebrasProvider(OpenAICompatibleProvider):
    """Cerebras chat completions provider."""

    DEFAULT_BASE_URL = CEREBRAS_BASE_URL
    API_KEY_ENV = "CEREBRAS_API_KEY"

    VALIDATION_MODEL = "llama3.1-8b"
    PRICING = CEREBRAS_PRICING
    MODEL_CAPABILITIES = {
        "streaming": "supported",
        "json_mode": "supported",
        "speed": "ultra-fast (1800 tokens/sec)",
    }

    @property
    def name(self) -> str:
        return "cerebras"

    def format_model_name(self, model_id: str) -> str:
        if "3.3" in model_id:
            return f"Llama 3.3: {model_id}"
        if "3.1" in model_id:
            return f"Llama 3.1: {model_id}"
        return model_id

    def enrich_model(self, model: Model) -> Model:
        model = super().enrich_model(model)
        # Reasoning labels are not advertised for Llama models
        model.capabilities.pop("reasoning", None)
        for pattern, description in _DESCRIPTIONS:
            if pattern in model.id:
                model.description = description
                break
        return model

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_chat=True,
            supports_agents=True,
            supports_streaming=True,
            supports_json_mode=True,
            supported_parameters=[
                "temperature", "max_tokens", "top_p", "stop",
                "frequency_penalty", "presence_penalty",
            ],
            max_requests_per_minute=60,
            max_tokens_per_request=CEREBRAS_CONTEXT_WINDOW,
        )
