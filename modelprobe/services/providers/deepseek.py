"""DeepSeek provider (OpenAI-compatible chat, reasoner and coder models)."""

from modelprobe.services.providers.base import ProviderCapabilities
from modelprobe.services.providers.catalog import PricingRule
from modelprobe.services.providers.openai_compatible import OpenAICompatibleProvider

DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"
DEEPSEEK_CONTEXT_WINDOW = 64000

DEEPSEEK_PRICING = (
    PricingRule("deepseek-chat", 0.27, 1.10, 64000, 8192, categories=("chat", "cost-effective")),
    PricingRule("deepseek-reasoner", 0.55, 2.19, 64000, 8192, can_reason=True,
                categories=("reasoning", "problem-solving")),
    PricingRule("deepseek-coder", 0.27, 1.10, 64000, 8192, categories=("coding", "cost-effective")),
    PricingRule("", 0.27, 1.10, 64000, 8192, categories=("chat",)),
)

_NAME_PREFIXES = (
    ("deepseek-chat", "DeepSeek Chat"),
    ("deepseek-reasoner", "DeepSeek Reasoner"),
    ("deepseek-coder", "DeepSeek Coder"),
)


class DeepSeekProvider(OpenAICompatibleProvider):
    """DeepSeek chat completions provider."""

    DEFAULT_BASE_URL = DEEPSEEK_BASE_URL
    API_KEY_ENV = "DEEPSEEK_API_KEY"

    VALIDATION_MODEL = "deepseek-chat"
    PRICING = DEEPSEEK_PRICING
    PRICING_BY_PREFIX = True
    MODEL_CAPABILITIES = {
        "function_calling": "full",
        "json_mode": "supported",
        "streaming": "supported",
    }

    @property
    def name(self) -> str:
        return "deepseek"

    def format_model_name(self, model_id: str) -> str:
        for prefix, label in _NAME_PREFIXES:
            if model_id.startswith(prefix):
                return f"{label}: {model_id}"
        return model_id

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_chat=True,
            supports_fim=True,
            supports_agents=True,
            supports_streaming=True,
            supports_json_mode=True,
            supported_parameters=[
                "temperature", "max_tokens", "top_p",
                "frequency_penalty", "presence_penalty", "stop",
            ],
            max_requests_per_minute=100,
            max_tokens_per_request=DEEPSEEK_CONTEXT_WINDOW,
        )
