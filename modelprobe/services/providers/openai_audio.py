"""OpenAI audio providers: Whisper (speech-to-text) and TTS (text-to-speech).

Both share the OpenAI base URL and bearer auth with the chat provider but
probe their own audio endpoints. Audio endpoints are accepted on any status
below 400. The speech endpoint returns audio bytes, so bodies are not decoded.
"""

import logging
from typing import List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.validation.audio import minimal_wav
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.providers.openai import OPENAI_BASE_URL, unix_to_iso
from modelprobe.services.validation.probes import JSONProbe, MultipartAudioProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

WHISPER_MODEL = "whisper-1"

# USD per 1M characters
TTS_MODELS = {
    "tts-1": ("Standard quality text-to-speech model", 15000.0),
    "tts-1-hd": ("High definition text-to-speech model", 30000.0),
}
TTS_VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")


class WhisperProvider(BaseProvider):
    """OpenAI Whisper transcription/translation provider."""

    DEFAULT_BASE_URL = OPENAI_BASE_URL
    DEFAULT_TIMEOUT_S = 30.0
    API_KEY_ENV = "OPENAI_API_KEY"

    probe_strategy = MultipartAudioProbe(policy=StatusPolicy.NOT_ERROR, model=WHISPER_MODEL)

    @property
    def name(self) -> str:
        return "whisper"

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint("GET", "/models", "List available models"),
            self.endpoint("POST", "/audio/transcriptions", "Transcribe audio to text"),
            self.endpoint("POST", "/audio/translations", "Translate audio to English"),
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)

        models = []
        for item in data.get("data", []):
            if item.get("id") != WHISPER_MODEL:
                continue
            models.append(
                Model(
                    id=item["id"],
                    name="Whisper",
                    description="General-purpose speech recognition model",
                    # $0.006 per minute
                    cost_per_1m_in=6000.0,
                    created_at=unix_to_iso(item.get("created")),
                    categories=["audio", "transcription", "stt"],
                    capabilities={
                        "audio_formats": "mp3,mp4,mpeg,mpga,m4a,wav,webm",
                        "max_file_size": "25MB",
                        "languages": "multilingual",
                    },
                )
            )

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} models for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_file_upload=True,
            supports_json_mode=True,
            supports_audio=True,
            supported_parameters=["file", "model", "language", "prompt", "response_format", "temperature"],
            security_features=["SOC2", "GDPR"],
            max_requests_per_minute=50,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        response = await self.send(
            "POST",
            "/audio/transcriptions",
            ctx,
            headers=self.auth_headers(),
            files={"file": ("test.wav", minimal_wav(), "audio/wav")},
            data={"model": model_id},
        )
        self._check_status(response, 200)
        if verbose:
            logger.info(f"Model {model_id} is working")


class TTSProvider(BaseProvider):
    """OpenAI text-to-speech provider."""

    DEFAULT_BASE_URL = OPENAI_BASE_URL
    DEFAULT_TIMEOUT_S = 30.0
    API_KEY_ENV = "OPENAI_API_KEY"

    probe_strategy = JSONProbe(policy=StatusPolicy.NOT_ERROR, decode_json=False)

    @property
    def name(self) -> str:
        return "tts"

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint("GET", "/models", "List available models"),
            self.endpoint(
                "POST",
                "/audio/speech",
                "Generate speech from text",
                test_params={"model": "tts-1", "input": "Test", "voice": "alloy"},
            ),
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)

        models = []
        for item in data.get("data", []):
            model_id = item.get("id")
            if model_id not in TTS_MODELS:
                continue
            description, cost = TTS_MODELS[model_id]
            models.append(
                Model(
                    id=model_id,
                    name="OpenAI TTS",
                    description=description,
                    cost_per_1m_in=cost,
                    context_window=4096,
                    max_tokens=4096,
                    can_stream=True,
                    created_at=unix_to_iso(item.get("created")),
                    categories=["audio", "tts", "speech"],
                    capabilities={
                        "voices": ",".join(TTS_VOICES),
                        "formats": "mp3,opus,aac,flac,wav,pcm",
                        "speed_range": "0.25-4.0",
                        "max_input_chars": "4096",
                    },
                )
            )

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} models for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_streaming=True,
            supports_audio=True,
            supported_parameters=["model", "input", "voice", "response_format", "speed"],
            security_features=["SOC2", "GDPR"],
            max_requests_per_minute=50,
            max_tokens_per_request=4096,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        response = await self.send(
            "POST",
            "/audio/speech",
            ctx,
            headers=self.auth_headers(),
            json={"model": model_id, "input": "Test", "voice": "alloy"},
        )
        self._check_status(response, 200)
        if verbose:
            logger.info(f"Model {model_id} is working ({len(response.content)} bytes of audio)")
