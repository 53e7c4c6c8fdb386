"""Endpoint descriptors and the per-provider endpoint registry.

Each provider owns exactly one EndpointRegistry, built lazily on the first
``get_endpoints()`` call and returned unchanged afterwards. The validator
mutates the endpoints in place through ``record()``; nothing else writes
status, latency or error.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class EndpointStatus(str, Enum):
    """Health of a declared endpoint.

    Attributes:
        UNKNOWN: Never validated
        WORKING: Last probe succeeded
        FAILED: Last probe failed (see Endpoint.error)
        DEPRECATED: Declared but retired by the vendor
    """
    UNKNOWN = "unknown"
    WORKING = "working"
    FAILED = "failed"
    DEPRECATED = "deprecated"


@dataclass
class Endpoint:
    """One testable API surface of a provider.

    Attributes:
        path: Path relative to the provider base URL, may contain ``{id}``
        method: HTTP method
        description: Human readable label
        headers: Request headers, may carry credentials
        test_params: JSON body sent by POST probes
        critical: Fail the whole validation call when this endpoint fails
        status: Result of the last probe
        latency: Seconds taken by the last probe
        error: Last failure message, empty when working

    Invariants:
        - status == UNKNOWN, latency == 0 and error == "" before validation
        - status == FAILED implies error != ""
    """
    path: str
    method: str
    description: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    test_params: Optional[Dict[str, Any]] = None
    critical: bool = False
    status: EndpointStatus = EndpointStatus.UNKNOWN
    latency: float = 0.0
    error: str = ""

    @property
    def latency_ms(self) -> int:
        return int(round(self.latency * 1000))

    @property
    def is_working(self) -> bool:
        return self.status == EndpointStatus.WORKING

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization (headers excluded)."""
        return {
            "path": self.path,
            "method": self.method,
            "description": self.description,
            "critical": self.critical,
            "status": self.status.value,
            "latency_ms": self.latency_ms,
            "error": self.error or None,
        }


class EndpointRegistry(Sequence):
    """Ordered, indexable collection of a provider's endpoints."""

    def __init__(self, endpoints: Iterable[Endpoint]):
        self._endpoints: List[Endpoint] = list(endpoints)

    def __getitem__(self, index):
        return self._endpoints[index]

    def __len__(self) -> int:
        return len(self._endpoints)

    def __repr__(self) -> str:
        return f"EndpointRegistry({self._endpoints!r})"

    def record(self, index: int, latency: float, error: Optional[str] = None) -> None:
        """Store the outcome of one probe.

        Callers must hold the validation run's lock.
        """
        endpoint = self._endpoints[index]
        endpoint.latency = latency
        if error:
            endpoint.status = EndpointStatus.FAILED
            endpoint.error = error
        else:
            endpoint.status = EndpointStatus.WORKING
            endpoint.error = ""

    def failed(self) -> List[Endpoint]:
        return [e for e in self._endpoints if e.status == EndpointStatus.FAILED]

    def working(self) -> List[Endpoint]:
        return [e for e in self._endpoints if e.status == EndpointStatus.WORKING]

    def summary(self) -> Dict[str, int]:
        """Count endpoints per status."""
        counts = {status.value: 0 for status in EndpointStatus}
        for endpoint in self._endpoints:
            counts[endpoint.status.value] += 1
        return counts

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._endpoints]
