"""Parallel endpoint validator.

Runs one asyncio task per endpoint of a provider's registry. Each task probes
its endpoint under the shared ProbeContext, then takes the run's lock to write
latency, status and error back into the registry. The run returns only after
every task has finished.

Contract:
    - Per-endpoint failures never propagate; they end up in ``endpoint.error``
    - After the join every endpoint is WORKING or FAILED
    - A failed endpoint marked ``critical`` raises CriticalEndpointError
      once all results are recorded
    - With ``fail_if_all_failed``, a non-empty registry without a single
      working endpoint raises AllEndpointsFailedError carrying the first error
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.core.exceptions import (
    AllEndpointsFailedError,
    CriticalEndpointError,
    ProviderError,
)
from modelprobe.observability.logging import LogContext, get_logger, log_event
from modelprobe.observability.metrics import metrics
from modelprobe.services.validation.registry import Endpoint, EndpointRegistry

logger = get_logger(__name__)

ProbeFn = Callable[[Endpoint, ProbeContext], Awaitable[None]]


class EndpointValidator:
    """Validates every endpoint of one registry concurrently.

    Class Invariants:
        - Registry writes happen only inside the run's lock
        - Each task writes only the entry at its own index

    Thread Safety:
        A validator must not run twice at the same time on the same registry.
        ProviderService serialises runs per provider instance.
    """

    def __init__(
        self,
        provider_name: str,
        registry: EndpointRegistry,
        probe: ProbeFn,
        fail_if_all_failed: bool = False,
    ):
        self.provider_name = provider_name
        self.registry = registry
        self.probe = probe
        self.fail_if_all_failed = fail_if_all_failed

    async def run(self, ctx: Optional[ProbeContext] = None, verbose: bool = False) -> None:
        """Probe all endpoints in parallel and record the results.

        Args:
            ctx: Shared deadline/cancellation for every probe
            verbose: Log progress at INFO instead of DEBUG

        Raises:
            CriticalEndpointError: An endpoint marked critical failed
            AllEndpointsFailedError: Nothing works and fail_if_all_failed is set
        """
        ctx = ctx or ProbeContext.background()
        lock = asyncio.Lock()
        level = logging.INFO if verbose else logging.DEBUG
        start_time = time.perf_counter()

        with LogContext(provider=self.provider_name):
            await asyncio.gather(
                *(self._check(index, ctx, lock, level) for index in range(len(self.registry)))
            )

            duration = time.perf_counter() - start_time
            failed = self.registry.failed()
            outcome = "failed" if failed else "ok"
            metrics.record_validation(self.provider_name, outcome, duration)
            log_event(
                logger,
                level,
                f"Validated {len(self.registry)} endpoints for {self.provider_name}: "
                f"{len(self.registry) - len(failed)} working, {len(failed)} failed",
                provider=self.provider_name,
                duration_ms=int(duration * 1000),
            )

        for endpoint in self.registry:
            if endpoint.critical and endpoint.error:
                raise CriticalEndpointError(
                    self.provider_name, endpoint.method, endpoint.path, endpoint.error
                )

        if self.fail_if_all_failed and len(self.registry) and not self.registry.working():
            raise AllEndpointsFailedError(self.provider_name, self.registry[0].error)

    async def _check(
        self,
        index: int,
        ctx: ProbeContext,
        lock: asyncio.Lock,
        level: int,
    ) -> None:
        endpoint = self.registry[index]
        logger.log(level, f"Testing endpoint: {endpoint.method} {endpoint.path}")

        error: Optional[str] = None
        start = time.perf_counter()
        try:
            await self.probe(endpoint, ctx)
        except ProviderError as e:
            error = str(e)
        except Exception as e:
            logger.warning(
                f"Unexpected error probing {endpoint.method} {endpoint.path}: {e}",
                exc_info=True,
            )
            error = str(e) or type(e).__name__
        latency = time.perf_counter() - start

        async with lock:
            self.registry.record(index, latency, error)

        metrics.record_endpoint_probe(
            self.provider_name,
            endpoint.method,
            endpoint.path,
            "failed" if error else "working",
            latency,
        )
        if error:
            logger.log(level, f"Endpoint failed: {endpoint.method} {endpoint.path} - {error}")
        else:
            logger.log(
                level,
                f"Endpoint working: {endpoint.method} {endpoint.path} ({endpoint.latency_ms}ms)",
            )
