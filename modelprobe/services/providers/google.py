"""Google Gemini provider.

Authenticates with the ``key`` query parameter rather than a header, so the
endpoint headers carry no credential.
"""

import logging
from typing import Any, Dict, List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.providers.catalog import PricingRule, apply_rule, match_rule
from modelprobe.services.providers.openai import TEST_PROMPT
from modelprobe.services.validation.probes import JSONProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

GOOGLE_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GENERATION_METHODS = {"generateContent", "streamGenerateContent"}

_GEMINI = dict(supports_images=True, supports_tools=True)

# Substring matched, first hit wins. flash-lite precedes flash.
GOOGLE_PRICING = (
    PricingRule("gemini-3-pro", 2.00, 12.00, can_reason=True, **_GEMINI,
                categories=("chat", "reasoning", "multimodal", "preview"),
                capabilities={"reasoning": "adaptive", "vision": "high", "function_calling": "full",
                              "streaming": "supported", "json_mode": "supported"}),
    PricingRule("gemini-3-flash", 0.50, 3.00, can_reason=True, **_GEMINI,
                categories=("chat", "fast", "multimodal", "preview"),
                capabilities={"reasoning": "advanced", "vision": "high", "function_calling": "full",
                              "streaming": "supported"}),
    PricingRule("gemini-2.5-pro", 1.25, 10.00, can_reason=True, **_GEMINI,
                categories=("chat", "reasoning", "coding", "multimodal"),
                capabilities={"reasoning": "advanced", "vision": "high", "function_calling": "full",
                              "streaming": "supported", "json_mode": "supported"}),
    PricingRule("gemini-2.5-flash-lite", 0.10, 0.40, **_GEMINI,
                categories=("chat", "fast", "ultra-efficient"),
                capabilities={"function_calling": "full", "streaming": "supported"}),
    PricingRule("gemini-2.5-flash", 0.30, 2.50, **_GEMINI,
                categories=("chat", "fast", "cost-effective", "multimodal"),
                capabilities={"vision": "high", "function_calling": "full", "streaming": "supported"}),
    PricingRule("gemini-2.0-flash", 0.30, 1.20, **_GEMINI,
                categories=("chat", "balanced", "multimodal"),
                capabilities={"vision": "medium", "function_calling": "full", "streaming": "supported"}),
    PricingRule("gemini-1.5-pro", 1.25, 5.00, can_reason=True, **_GEMINI,
                categories=("chat", "premium", "multimodal", "legacy"),
                capabilities={"reasoning": "good", "vision": "high", "function_calling": "full",
                              "streaming": "supported"}),
    PricingRule("gemini-pro", 1.25, 5.00, can_reason=True, **_GEMINI,
                categories=("chat", "premium", "multimodal", "legacy"),
                capabilities={"reasoning": "good", "vision": "high", "function_calling": "full",
                              "streaming": "supported"}),
    PricingRule("gemini-1.5-flash", 0.075, 0.30, **_GEMINI,
                categories=("chat", "fast", "legacy"),
                capabilities={"vision": "medium", "function_calling": "full", "streaming": "supported"}),
    PricingRule("gemini-flash", 0.075, 0.30, **_GEMINI,
                categories=("chat", "fast", "legacy"),
                capabilities={"vision": "medium", "function_calling": "full", "streaming": "supported"}),
    PricingRule("image", 1.00, 30.00, supports_tools=True,
                categories=("image-generation", "multimodal"),
                capabilities={"image_generation": "high-fidelity", "image_editing": "conversational"}),
    PricingRule("embedding", 0.025, 0.00,
                categories=("embedding",),
                capabilities={"embedding": "text"}),
    PricingRule("", 1.00, 3.00, **_GEMINI,
                categories=("chat",),
                capabilities={"function_calling": "full"}),
)


def is_generative_model(item: Dict[str, Any]) -> bool:
    """Check if a listed model supports text generation."""
    return bool(GENERATION_METHODS.intersection(item.get("supportedGenerationMethods") or []))


class GoogleProvider(BaseProvider):
    """Gemini generative language API provider."""

    DEFAULT_BASE_URL = GOOGLE_BASE_URL
    DEFAULT_TIMEOUT_S = 30.0
    API_KEY_ENV = "GOOGLE_API_KEY"

    probe_strategy = JSONProbe(policy=StatusPolicy.SUCCESS)

    @property
    def name(self) -> str:
        return "google"

    def auth_headers(self) -> Dict[str, str]:
        return {}

    def _auth_params(self) -> Dict[str, str]:
        return {"key": self.api_key}

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint("GET", "/models", "List available models"),
            self.endpoint(
                "POST",
                "/models/gemini-2.5-flash:generateContent",
                "Generate content",
                test_params={"contents": [{"parts": [{"text": "Hi"}]}]},
            ),
        ]

    def enrich_model(self, model: Model) -> Model:
        model.capabilities = {}
        apply_rule(model, match_rule(model.id, GOOGLE_PRICING))
        model.can_stream = True
        return model

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)

        models = []
        for item in data.get("models", []):
            if not is_generative_model(item):
                continue
            model_id = item.get("name", "").removeprefix("models/")
            model = Model(
                id=model_id,
                name=item.get("displayName") or model_id,
                description=item.get("description", ""),
                context_window=item.get("inputTokenLimit", 0),
                max_tokens=item.get("outputTokenLimit", 0),
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
            supports_embeddings=True,
            supports_fine_tuning=True,
            supports_agents=True,
            supports_file_upload=True,
            supports_streaming=True,
            supports_json_mode=True,
            supports_vision=True,
            supports_audio=True,
            supported_parameters=["temperature", "maxOutputTokens", "topP", "topK", "stopSequences"],
            security_features=["safety_settings", "content_filtering", "harm_categories"],
            max_requests_per_minute=60,
            max_tokens_per_request=1000000,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        await self._request_json(
            "POST",
            f"/models/{model_id}:generateContent",
            ctx,
            json={
                "contents": [{"parts": [{"text": TEST_PROMPT}]}],
                "generationConfig": {"maxOutputTokens": 10},
            },
        )
        if verbose:
            logger.info(f"Model {model_id} is working")
