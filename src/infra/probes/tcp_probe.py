import asyncio
from time import perf_counter

from core.domain.check_result import ProbeOutcome
from core.domain.check_status import CheckStatus
from core.domain.endpoint import Endpoint
from core.port.probe import Probe
from infra.probes.http_probe import elapsed_ms


class TcpProbe(Probe):
    async def probe(self, endpoint: Endpoint) -> ProbeOutcome:
        started_at = perf_counter()

        try:
            host, port = endpoint.host_and_port()
        except ValueError as e:
            return ProbeOutcome(status=CheckStatus.DOWN, response_time_ms=0, error=str(e))

        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=endpoint.timeout_seconds,
            )
        except asyncio.TimeoutError:
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=elapsed_ms(started_at),
                error=f"Connection to {host}:{port} timed out",
            )
        except OSError as e:
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=elapsed_ms(started_at),
                error=f"Connection to {host}:{port} failed: {e.strerror or e}",
            )

        response_time_ms = elapsed_ms(started_at)

        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass

        return ProbeOutcome(status=CheckStatus.HEALTHY, response_time_ms=response_time_ms)
