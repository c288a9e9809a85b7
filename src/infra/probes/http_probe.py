from time import perf_counter

import httpx
import structlog

from core.domain.check_result import ProbeOutcome
from core.domain.check_status import CheckStatus
from core.domain.endpoint import Endpoint
from core.port.probe import Probe

logger = structlog.stdlib.get_logger(__name__)

DEFAULT_USER_AGENT = "Uptime-Monitor/1.0"


def elapsed_ms(started_at: float) -> int:
    return int((perf_counter() - started_at) * 1_000)


class HttpProbe(Probe):
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        method: str = "GET",
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.http_client = http_client
        self.method = method
        self.user_agent = user_agent

    async def probe(self, endpoint: Endpoint) -> ProbeOutcome:
        started_at = perf_counter()

        try:
            response = await self.http_client.request(
                self.method,
                endpoint.target,
                timeout=endpoint.timeout_seconds,
                headers={"User-Agent": self.user_agent},
            )
        except httpx.TimeoutException:
            logger.debug(f"HTTP probe timeout for '{endpoint.name}' (timeout: {endpoint.timeout_seconds}s)")
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=elapsed_ms(started_at),
                error="Request timeout",
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.debug(f"HTTP probe failed for '{endpoint.name}': {e}")
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=elapsed_ms(started_at),
                error=str(e) or e.__class__.__name__,
            )

        response_time_ms = elapsed_ms(started_at)

        if response.status_code in endpoint.success_codes:
            return ProbeOutcome(
                status=CheckStatus.HEALTHY,
                response_time_ms=response_time_ms,
                status_code=response.status_code,
            )

        return ProbeOutcome(
            status=CheckStatus.DEGRADED,
            response_time_ms=response_time_ms,
            status_code=response.status_code,
            error=f"Unexpected status code {response.status_code}",
        )
