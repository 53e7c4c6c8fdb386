"""Midjourney image generation provider.

Midjourney publishes no model listing endpoint, so the catalog is static.
Generation endpoints answer probe requests with 4xx for unpaid or
parameter-rejected calls, which still proves reachability.
"""

import logging
from typing import List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.core.exceptions import ValidationError
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.validation.probes import GenerationProbe
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

MIDJOURNEY_BASE_URL = "https://api.midjourney.com/v1"
MIDJOURNEY_MODELS = ("v6", "v6.1")

_IMAGE_CAPABILITIES = {
    "max_prompt_length": "350",
    "aspect_ratios": "1:1,16:9,9:16,4:3,3:2",
    "stylize_range": "0-1000",
    "chaos_range": "0-100",
    "weird_range": "0-3000",
}


class MidjourneyProvider(BaseProvider):
    """Midjourney imagine API provider."""

    DEFAULT_BASE_URL = MIDJOURNEY_BASE_URL
    DEFAULT_TIMEOUT_S = 90.0
    API_KEY_ENV = "MIDJOURNEY_API_KEY"

    probe_strategy = GenerationProbe()

    @property
    def name(self) -> str:
        return "midjourney"

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint(
                "POST",
                "/imagine",
                "Generate image from text prompt",
                test_params={"prompt": "test image", "model": "v6"},
            ),
            self.endpoint("GET", "/status/{id}", "Check generation status"),
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        return [
            Model(
                id="v6",
                name="Midjourney V6",
                description="Latest Midjourney model with improved photorealism and prompt adherence",
                supports_images=True,
                categories=["image-generation", "text-to-image"],
                capabilities=dict(_IMAGE_CAPABILITIES),
            ),
            Model(
                id="v6.1",
                name="Midjourney V6.1",
                description="Enhanced V6 with improved coherence and detail",
                supports_images=True,
                categories=["image-generation", "text-to-image"],
                capabilities=dict(_IMAGE_CAPABILITIES),
            ),
        ]

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supported_parameters=[
                "prompt", "model", "aspect_ratio", "quality",
                "stylize", "chaos", "weird", "tile",
            ],
            security_features=["api_key_auth"],
            max_requests_per_minute=60,
            max_tokens_per_request=350,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        if model_id not in MIDJOURNEY_MODELS:
            raise ValidationError(
                f"invalid model ID: {model_id} (valid: {', '.join(MIDJOURNEY_MODELS)})"
            )

        response = await self.send(
            "POST",
            "/imagine",
            ctx,
            headers=self.auth_headers(),
            json={"prompt": "test prompt for validation", "model": model_id},
        )
        self._check_status(response)
        data = self._decode_json(response)
        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Model {model_id} test successful (generation ID: {data.get('id', '')})",
        )
