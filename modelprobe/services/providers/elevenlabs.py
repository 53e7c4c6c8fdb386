"""ElevenLabs text-to-speech provider.

Voices are what a caller selects, so they are listed as models.
"""

import logging
from typing import Dict, List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.validation.probes import SimpleGetProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

ELEVENLABS_BASE_URL = "https://api.elevenlabs.io/v1"
TEST_TTS_MODEL = "eleven_monolingual_v1"

# Creator tier, USD per 1M characters
ELEVENLABS_COST_PER_1M = 180.0
MAX_CHARACTERS = 5000


class ElevenLabsProvider(BaseProvider):
    """ElevenLabs voice synthesis provider."""

    DEFAULT_BASE_URL = ELEVENLABS_BASE_URL
    DEFAULT_TIMEOUT_S = 30.0
    API_KEY_ENV = "ELEVENLABS_API_KEY"

    probe_strategy = SimpleGetProbe(policy=StatusPolicy.SUCCESS)

    @property
    def name(self) -> str:
        return "elevenlabs"

    def auth_headers(self) -> Dict[str, str]:
        return {"xi-api-key": self.api_key}

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint("GET", "/voices", "List available voices"),
            self.endpoint("GET", "/models", "List available TTS models"),
            self.endpoint("GET", "/user/subscription", "Get subscription and quota information"),
            self.endpoint("GET", "/history", "Get generation history"),
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/voices", ctx)

        models = []
        for voice in data.get("voices", []):
            categories = ["tts", "voice"]
            if voice.get("category"):
                categories.append(voice["category"])
            models.append(
                Model(
                    id=voice["voice_id"],
                    name=voice.get("name", ""),
                    description=voice.get("description") or "",
                    cost_per_1m_in=ELEVENLABS_COST_PER_1M,
                    context_window=MAX_CHARACTERS,
                    can_stream=True,
                    categories=categories,
                    capabilities=dict(voice.get("labels") or {}),
                )
            )

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} voices for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_file_upload=True,
            supports_streaming=True,
            supports_audio=True,
            supported_parameters=["voice_id", "model_id", "voice_settings", "stability", "similarity_boost"],
            security_features=["voice_verification", "rate_limiting"],
            max_requests_per_minute=20,
            max_tokens_per_request=MAX_CHARACTERS,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        response = await self.send(
            "POST",
            f"/text-to-speech/{model_id}",
            ctx,
            headers=self.auth_headers(),
            json={"text": "Test", "model_id": TEST_TTS_MODEL},
        )
        self._check_status(response, 200)
        if verbose:
            logger.info(f"Voice {model_id} is working")
