"""OpenAI Realtime API provider.

The realtime API itself is a WebSocket protocol; only its model listing is
reachable over plain HTTP. That listing is the single endpoint and it is
marked critical, so validation fails loudly when it is down.
"""

from typing import Any, Dict, Iterable, List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.core.exceptions import NotFoundError, ValidationError
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.providers.openai import OPENAI_BASE_URL
from modelprobe.services.providers.openai_audio import TTS_VOICES
from modelprobe.services.validation.probes import SimpleGetProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

REALTIME_MODELS = ("gpt-4o-realtime-preview", "gpt-4o-realtime-preview-2024-10-01")
DEFAULT_REALTIME_MODEL = REALTIME_MODELS[0]
AUDIO_FORMATS = ("pcm16", "g711_ulaw", "g711_alaw")
CLIENT_EVENTS = frozenset({
    "session.update",
    "input_audio_buffer.append",
    "input_audio_buffer.commit",
    "input_audio_buffer.clear",
    "conversation.item.create",
    "conversation.item.truncate",
    "conversation.item.delete",
    "response.create",
    "response.cancel",
})


def session_config(
    model: str = DEFAULT_REALTIME_MODEL,
    modalities: Optional[Iterable[str]] = None,
    voice: str = "alloy",
    input_format: str = "pcm16",
    output_format: str = "pcm16",
) -> Dict[str, Any]:
    """Build a ``session.update`` payload, validating voice and audio formats.

    Raises:
        ValidationError: Unknown voice or audio format
    """
    if voice not in TTS_VOICES:
        raise ValidationError(f"invalid voice: {voice}")
    if input_format not in AUDIO_FORMATS:
        raise ValidationError(f"invalid input format: {input_format}")
    if output_format not in AUDIO_FORMATS:
        raise ValidationError(f"invalid output format: {output_format}")
    return {
        "model": model,
        "modalities": list(modalities or ("text", "audio")),
        "voice": voice,
        "input_audio_format": input_format,
        "output_audio_format": output_format,
    }


def validate_client_event(event: Dict[str, Any]) -> None:
    """Reject client events the realtime API does not accept."""
    event_type = event.get("type")
    if event_type not in CLIENT_EVENTS:
        raise ValidationError(f"invalid event type: {event_type}")


class RealtimeProvider(BaseProvider):
    """OpenAI GPT-4o realtime voice provider."""

    DEFAULT_BASE_URL = OPENAI_BASE_URL
    DEFAULT_TIMEOUT_S = 30.0
    API_KEY_ENV = "OPENAI_API_KEY"

    probe_strategy = SimpleGetProbe(policy=StatusPolicy.SUCCESS)

    @property
    def name(self) -> str:
        return "realtime"

    def auth_headers(self) -> Dict[str, str]:
        headers = super().auth_headers()
        headers["OpenAI-Beta"] = "realtime=v1"
        return headers

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint("GET", "/models", "List available realtime models", critical=True),
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)
        models = [
            Model(
                id=item["id"],
                name="GPT-4o Realtime",
                # Text token pricing; audio tokens cost 100/200 per 1M
                cost_per_1m_in=5.00,
                cost_per_1m_out=20.00,
                context_window=128000,
                max_tokens=4096,
                can_stream=True,
                categories=["realtime", "voice", "conversation", "audio"],
            )
            for item in data.get("data", [])
            if item.get("id") in REALTIME_MODELS
        ]
        if verbose:
            logger.info(f"Found {len(models)} realtime model(s)")
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_chat=True,
            supports_agents=True,
            supports_streaming=True,
            supports_audio=True,
            supported_parameters=["temperature", "max_tokens"],
            max_requests_per_minute=60,
            max_tokens_per_request=128000,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        models = await self.list_models(ctx, verbose)
        if not any(model.id == model_id for model in models):
            raise NotFoundError("Realtime model", model_id)
        if verbose:
            logger.info(f"Model {model_id} is available for realtime API")
