"""Concurrent endpoint validation shared by every provider."""

from modelprobe.services.validation.registry import (
    Endpoint,
    EndpointRegistry,
    EndpointStatus,
)
from modelprobe.services.validation.probes import (
    GenerationProbe,
    JSONProbe,
    MultipartAudioProbe,
    ProbeStrategy,
    SimpleGetProbe,
    StatusPolicy,
)
from modelprobe.services.validation.validator import EndpointValidator

__all__ = [
    "Endpoint",
    "EndpointRegistry",
    "EndpointStatus",
    "EndpointValidator",
    "GenerationProbe",
    "JSONProbe",
    "MultipartAudioProbe",
    "ProbeStrategy",
    "SimpleGetProbe",
    "StatusPolicy",
]
