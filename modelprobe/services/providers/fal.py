"""FAL.ai image and video generation provider.

Each model is its own endpoint under ``https://fal.run``, so the catalog is
static and every model path is checked with a one-image (or 16-frame) request.
FAL uses the ``Key`` authorization scheme.
"""

import logging
from typing import Any, Dict, List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.validation.probes import JSONProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

FAL_BASE_URL = "https://fal.run"

# (id, name, description, USD per generation, categories, capabilities)
FAL_MODELS = (
    ("fal-ai/flux-pro", "FLUX Pro", "FLUX Pro - Highest quality text-to-image model", 0.055,
     ("image-generation", "premium"),
     {"resolution": "up to 2048x2048", "speed": "fast", "quality": "highest"}),
    ("fal-ai/flux-dev", "FLUX Dev", "FLUX Dev - High quality text-to-image for development", 0.025,
     ("image-generation", "development"),
     {"resolution": "up to 2048x2048", "speed": "medium", "quality": "high"}),
    ("fal-ai/flux-schnell", "FLUX Schnell", "FLUX Schnell - Ultra-fast text-to-image generation", 0.003,
     ("image-generation", "fast", "cost-effective"),
     {"resolution": "up to 1024x1024", "speed": "ultra-fast", "quality": "good"}),
    ("fal-ai/stable-diffusion-v3-medium", "Stable Diffusion v3 Medium",
     "SD v3 Medium - Balanced quality and speed", 0.035,
     ("image-generation", "stable-diffusion"),
     {"resolution": "up to 1024x1024", "speed": "medium", "quality": "balanced"}),
    ("fal-ai/animatediff", "AnimateDiff", "AnimateDiff - Text-to-video generation", 0.15,
     ("video-generation",),
     {"resolution": "512x512", "duration": "up to 3 seconds", "fps": "8-16"}),
)


def is_video_model(model_id: str) -> bool:
    return "animatediff" in model_id


def generation_params(model_id: str, prompt: str = "test") -> Dict[str, Any]:
    """Minimal generation request body for a FAL model."""
    if is_video_model(model_id):
        return {"prompt": prompt, "num_frames": 16}
    return {"prompt": prompt, "num_images": 1}


class FALProvider(BaseProvider):
    """FAL.ai hosted generation models."""

    DEFAULT_BASE_URL = FAL_BASE_URL
    DEFAULT_TIMEOUT_S = 120.0
    API_KEY_ENV = "FAL_KEY"

    probe_strategy = JSONProbe(policy=StatusPolicy.NOT_ERROR)

    @property
    def name(self) -> str:
        return "fal"

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Key {self.api_key}"}

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint(
                "POST",
                f"/{model_id}",
                f"Generate {'videos' if is_video_model(model_id) else 'images'} with {name}",
                test_params=generation_params(model_id),
            )
            for model_id, name, *_ in FAL_MODELS
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        models = [
            Model(
                id=model_id,
                name=name,
                description=description,
                # Priced per generated image or video
                cost_per_1m_out=cost,
                supports_images=not is_video_model(model_id),
                categories=list(categories),
                capabilities=dict(capabilities),
            )
            for model_id, name, description, cost, categories, capabilities in FAL_MODELS
        ]
        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} models for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_file_upload=True,
            supports_json_mode=True,
            supported_parameters=[
                "prompt", "image_size", "num_images", "guidance_scale", "negative_prompt", "seed",
            ],
            security_features=["safety_checker"],
            max_requests_per_minute=30,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        body = generation_params(model_id, prompt="test generation")
        if is_video_model(model_id):
            body["fps"] = 8
        else:
            body["image_size"] = "square_hd"

        response = await self.send(
            "POST",
            f"/{model_id}",
            ctx,
            headers=self.auth_headers(),
            json=body,
        )
        self._check_status(response, 200)
        if verbose:
            data = self._decode_json(response)
            if data.get("images"):
                logger.info(f"Model {model_id} generated {len(data['images'])} image(s)")
            elif data.get("video", {}).get("url"):
                logger.info(f"Model {model_id} generated a video")
