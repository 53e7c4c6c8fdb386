"""PlayHT text-to-speech provider.

PlayHT authenticates with a user id and a secret key sent as two headers.
Both travel in one configured key of the form ``user_id:secret``; a key
without a colon is used as the secret with an empty user id.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.validation.probes import SimpleGetProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

PLAYHT_BASE_URL = "https://api.play.ht/api/v2"

# $0.04 per 1K characters
PLAYHT_COST_PER_1M = 40.0
MAX_CHARACTERS = 5000


def split_credentials(api_key: str) -> Tuple[str, str]:
    """Split ``user_id:secret`` into its parts."""
    user_id, sep, secret = api_key.partition(":")
    if not sep:
        return "", api_key
    return user_id, secret


class PlayHTProvider(BaseProvider):
    """PlayHT voice synthesis provider."""

    DEFAULT_BASE_URL = PLAYHT_BASE_URL
    DEFAULT_TIMEOUT_S = 60.0
    API_KEY_ENV = "PLAYHT_API_KEY"

    probe_strategy = SimpleGetProbe(policy=StatusPolicy.SUCCESS)

    def __init__(self, api_key: str, **kwargs: Any):
        self.user_id, secret = split_credentials(api_key)
        super().__init__(secret, **kwargs)

    @property
    def name(self) -> str:
        return "playht"

    def auth_headers(self) -> Dict[str, str]:
        return {"X-USER-ID": self.user_id, "AUTHORIZATION": self.api_key}

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint("GET", "/voices", "List available voices"),
            self.endpoint("POST", "/tts", "Generate speech from text"),
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        voices = await self._request_json("GET", "/voices", ctx)

        models = []
        for voice in voices or []:
            description = voice.get("name", "")
            if voice.get("language"):
                description += f" ({voice['language']})"
            if voice.get("gender"):
                description += f" - {voice['gender']}"

            models.append(
                Model(
                    id=voice["id"],
                    name=voice.get("name", ""),
                    description=description,
                    cost_per_1m_in=PLAYHT_COST_PER_1M,
                    context_window=MAX_CHARACTERS,
                    max_tokens=MAX_CHARACTERS,
                    can_stream=True,
                    categories=["audio", "tts", "voice"],
                    capabilities={
                        key: voice.get(key) or ""
                        for key in ("language", "gender", "accent", "style", "age")
                    },
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
            supported_parameters=[
                "text", "voice", "quality", "output_format", "speed", "sample_rate", "voice_engine",
            ],
            security_features=["API_key_authentication", "rate_limiting"],
            max_requests_per_minute=60,
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
            "/tts",
            ctx,
            headers=self.auth_headers(),
            json={"text": "Test", "voice": model_id, "quality": "medium", "output_format": "mp3"},
        )
        self._check_status(response, 200)
        if verbose:
            logger.info(f"Voice {model_id} is working")
