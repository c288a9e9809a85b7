import asyncio
import re
from time import perf_counter
from typing import Optional

from core.domain.check_result import ProbeOutcome
from core.domain.check_status import CheckStatus
from core.domain.endpoint import Endpoint
from core.port.probe import Probe
from infra.probes.http_probe import elapsed_ms

_PING_TIME_PATTERN = re.compile(r"time[=<](\d+\.?\d*)\s*ms")


def parse_ping_time_ms(output: str) -> Optional[int]:
    match = _PING_TIME_PATTERN.search(output)

    if match is None:
        return None

    return int(round(float(match.group(1))))


class PingProbe(Probe):
    """Single ICMP echo through the system ``ping`` binary.

    Arguments follow iputils and BusyBox ``ping``, where ``-W`` is in seconds. Other
    implementations are still bounded by the one second of slack on the subprocess wait.
    """

    def __init__(self, ping_binary: str = "ping") -> None:
        self.ping_binary = ping_binary

    async def probe(self, endpoint: Endpoint) -> ProbeOutcome:
        started_at = perf_counter()

        try:
            host = endpoint.host
        except ValueError as e:
            return ProbeOutcome(status=CheckStatus.DOWN, response_time_ms=0, error=str(e))

        try:
            proc = await asyncio.create_subprocess_exec(
                self.ping_binary, "-c", "1", "-W", str(endpoint.timeout_seconds), host,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=elapsed_ms(started_at),
                error=f"Cannot run {self.ping_binary}: {e}",
            )

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=endpoint.timeout_seconds + 1)
        except asyncio.TimeoutError:
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=elapsed_ms(started_at),
                error="Ping timeout",
            )
        finally:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()

        if proc.returncode != 0:
            details = stderr.decode(errors="replace").strip() or f"{host} did not answer"
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=elapsed_ms(started_at),
                error=details,
            )

        reported_ms = parse_ping_time_ms(stdout.decode(errors="replace"))

        return ProbeOutcome(
            status=CheckStatus.HEALTHY,
            response_time_ms=reported_ms if reported_ms is not None else elapsed_ms(started_at),
        )
