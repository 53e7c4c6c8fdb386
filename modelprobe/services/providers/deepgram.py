"""Deepgram speech-to-text provider."""

import logging
from typing import Dict, List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.validation.probes import SimpleGetProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

DEEPGRAM_BASE_URL = "https://api.deepgram.com/v1"
SAMPLE_AUDIO_URL = "https://static.deepgram.com/examples/Bueller-Life-moves-pretty-fast.wav"

# Nova-2 at $0.0043/min, roughly 60 tokens per minute of speech
DEEPGRAM_COST_PER_1M = 4.30


class DeepgramProvider(BaseProvider):
    """Deepgram transcription provider."""

    DEFAULT_BASE_URL = DEEPGRAM_BASE_URL
    DEFAULT_TIMEOUT_S = 30.0
    API_KEY_ENV = "DEEPGRAM_API_KEY"

    probe_strategy = SimpleGetProbe(policy=StatusPolicy.SUCCESS)

    @property
    def name(self) -> str:
        return "deepgram"

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Token {self.api_key}"}

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint("GET", "/models", "List available STT models"),
            self.endpoint("GET", "/projects", "List projects"),
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)

        models = []
        for item in data.get("stt", []):
            language = item.get("language", "")
            streaming = bool(item.get("streaming"))
            categories = ["stt", "transcription"]
            if item.get("batch"):
                categories.append("batch")
            if streaming:
                categories.append("streaming")
            if language:
                categories.append(language)

            models.append(
                Model(
                    id=item.get("canonical_name", ""),
                    name=item.get("name", ""),
                    description=f"{language} - {item.get('architecture', '')} architecture",
                    cost_per_1m_in=DEEPGRAM_COST_PER_1M,
                    can_stream=streaming,
                    categories=categories,
                )
            )

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} models for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_fine_tuning=True,
            supports_file_upload=True,
            supports_streaming=True,
            supports_audio=True,
            supported_parameters=["model", "language", "punctuate", "diarize", "smart_format", "utterances"],
            security_features=["on_prem_deployment", "soc2_compliant", "hipaa_compliant"],
            max_requests_per_minute=60,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        await self._request_json(
            "POST",
            "/listen",
            ctx,
            params={"model": model_id},
            json={"url": SAMPLE_AUDIO_URL},
        )
        if verbose:
            logger.info(f"Model {model_id} is working")
