import asyncio
from time import perf_counter
from typing import Awaitable, Callable, Mapping

import structlog

from core.domain.check_result import CheckResult, ProbeOutcome
from core.domain.check_status import CheckStatus
from core.domain.endpoint import Endpoint
from core.domain.probe_type import ProbeType
from core.port.clock import Clock
from core.port.probe import Probe

logger = structlog.stdlib.get_logger(__name__)

DEFAULT_RETRY_BACKOFF_SECONDS = 1.0


class CheckExecutor:
    """Runs the probe matching an endpoint's type under its timeout and retry policy.

    ``execute`` never raises: every failure ends up as a ``down`` result whose
    ``error`` field carries the reason.
    """

    def __init__(
        self,
        probes: Mapping[ProbeType, Probe],
        clock: Clock,
        retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if ProbeType.HTTP not in probes:
            raise ValueError("An HTTP probe is required as fallback for unknown endpoint types")

        self.probes = dict(probes)
        self.clock = clock
        self.retry_backoff_seconds = retry_backoff_seconds
        self._sleep = sleep

    def probe_for(self, probe_type: ProbeType) -> Probe:
        return self.probes.get(probe_type, self.probes[ProbeType.HTTP])

    async def execute(self, endpoint: Endpoint) -> CheckResult:
        if not endpoint.enabled:
            return CheckResult(
                endpoint_id=endpoint.id,
                status=CheckStatus.DOWN,
                response_time_ms=0,
                checked_at=self.clock.now(),
                error="disabled",
            )

        probe = self.probe_for(endpoint.type)

        outcome = await self._attempt(probe, endpoint)
        attempts = 1

        while outcome.status is CheckStatus.DOWN and attempts <= endpoint.retry_count:
            await self._sleep(self.retry_backoff_seconds)

            outcome = await self._attempt(probe, endpoint)
            attempts += 1

        if attempts > 1:
            logger.debug(
                f"Check for '{endpoint.name}' finished after {attempts} attempts with status={outcome.status.value}"
            )

        return CheckResult.from_outcome(endpoint.id, outcome, self.clock.now())

    async def _attempt(self, probe: Probe, endpoint: Endpoint) -> ProbeOutcome:
        started_at = perf_counter()

        try:
            return await asyncio.wait_for(probe.probe(endpoint), timeout=endpoint.timeout_seconds)
        except asyncio.TimeoutError:
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=int((perf_counter() - started_at) * 1_000),
                error=f"Timed out after {endpoint.timeout_seconds}s",
            )
        except Exception as e:
            logger.exception(f"Unexpected error probing '{endpoint.name}': {e}")
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=int((perf_counter() - started_at) * 1_000),
                error=str(e) or e.__class__.__name__,
            )
