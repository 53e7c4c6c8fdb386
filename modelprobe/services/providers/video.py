"""Video generation providers (Runway ML, Luma AI).

Both vendors expose the same surface: create a generation, poll it by id.
Their catalogs are static and pricing is per generation, so token costs are 0.
"""

import logging
from typing import Any, Dict, List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.validation.probes import GenerationProbe
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)


class VideoGenerationProvider(BaseProvider):
    """Shared behaviour of generation-id based video APIs."""

    DEFAULT_TIMEOUT_S = 60.0

    probe_strategy = GenerationProbe()

    # Body of the POST /generations probe
    PROBE_PARAMS: Dict[str, Any] = {}

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint(
                "POST",
                "/generations",
                "Create a new video generation",
                test_params=dict(self.PROBE_PARAMS),
            ),
            self.endpoint("GET", "/generations/{id}", "Get generation status"),
        ]

    def _test_request(self, model_id: str) -> Dict[str, Any]:
        raise NotImplementedError

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        response = await self.send(
            "POST",
            "/generations",
            ctx,
            headers=self.auth_headers(),
            json=self._test_request(model_id),
        )
        self._check_status(response, 200, 201)
        generation = self._decode_json(response)
        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Model {model_id} test successful (generation ID: {generation.get('id', '')})",
        )


class RunwayMLProvider(VideoGenerationProvider):
    """Runway Gen-2/Gen-3 provider."""

    DEFAULT_BASE_URL = "https://api.runwayml.com/v1"
    API_KEY_ENV = "RUNWAYML_API_KEY"
    PROBE_PARAMS = {"prompt": "test", "model": "gen2"}

    @property
    def name(self) -> str:
        return "runwayml"

    def _test_request(self, model_id: str) -> Dict[str, Any]:
        return {
            "prompt": "A cinematic shot of a serene lake at sunset",
            "model": model_id,
            "duration": 4,
            "aspect_ratio": "16:9",
            "motion_control": {"strength": 0.5, "smoothness": 0.7},
            "camera_motion": {"type": "pan", "intensity": 0.3, "direction": "right"},
        }

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        shared = {
            "resolution": "1280x768",
            "aspect_ratios": "16:9,9:16,1:1",
            "motion_control": "supported",
            "camera_motion": "supported",
            "image_to_video": "supported",
            "pricing_model": "per_generation",
        }
        return [
            Model(
                id="gen2",
                name="Gen-2",
                description="Runway Gen-2 for high-quality video generation with motion control",
                context_window=2000,
                max_tokens=2000,
                supports_images=True,
                categories=["video", "generation", "creative"],
                capabilities={"duration": "4_seconds_default", "max_duration": "16_seconds", **shared},
            ),
            Model(
                id="gen3",
                name="Gen-3",
                description="Runway Gen-3 for advanced video generation with enhanced motion control",
                context_window=2000,
                max_tokens=2000,
                supports_images=True,
                categories=["video", "generation", "creative"],
                capabilities={"duration": "5_seconds_default", "max_duration": "10_seconds", **shared},
            ),
        ]

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_file_upload=True,
            supports_vision=True,
            supported_parameters=[
                "prompt", "model", "duration", "aspect_ratio",
                "image_url", "motion_control", "camera_motion",
            ],
            security_features=["API_key_authentication", "rate_limiting"],
            max_requests_per_minute=30,
            max_tokens_per_request=2000,
        )


class LumaAIProvider(VideoGenerationProvider):
    """Luma Dream Machine provider."""

    DEFAULT_BASE_URL = "https://api.lumalabs.ai/v1"
    API_KEY_ENV = "LUMAAI_API_KEY"
    PROBE_PARAMS = {"prompt": "test"}

    @property
    def name(self) -> str:
        return "lumaai"

    def _test_request(self, model_id: str) -> Dict[str, Any]:
        # Dream Machine has a single model, the id is not part of the request
        return {"prompt": "A serene lake at sunset", "aspect_ratio": "16:9", "loop": False}

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        return [
            Model(
                id="dream-machine-v1",
                name="Dream Machine v1",
                description="Luma AI's Dream Machine for high-quality video generation from text and images",
                context_window=2000,
                max_tokens=2000,
                supports_images=True,
                categories=["video", "generation", "creative"],
                capabilities={
                    "video_length": "5_seconds",
                    "resolution": "1080p",
                    "aspect_ratios": "16:9,9:16,1:1",
                    "loop": "supported",
                    "keyframes": "supported",
                    "pricing_model": "per_generation",
                },
            ),
        ]

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_file_upload=True,
            supports_vision=True,
            supported_parameters=["prompt", "aspect_ratio", "loop", "keyframes"],
            security_features=["API_key_authentication", "rate_limiting"],
            max_requests_per_minute=20,
            max_tokens_per_request=2000,
        )
