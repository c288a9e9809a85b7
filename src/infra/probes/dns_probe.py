import asyncio
import socket
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from time import perf_counter
from typing import Callable

from core.domain.check_result import ProbeOutcome
from core.domain.check_status import CheckStatus
from core.domain.endpoint import Endpoint
from core.port.probe import Probe
from infra.probes.http_probe import elapsed_ms

DEFAULT_MAX_CONCURRENT_LOOKUPS = 4


class DnsProbe(Probe):
    """Resolves the endpoint host.

    A blocking resolver call cannot be aborted once started: on timeout the
    probe stops waiting while the lookup finishes in the background. Lookups
    run on a dedicated pool of ``max_concurrent_lookups`` threads so hung
    resolutions queue there instead of filling the event loop's default executor.
    """

    def __init__(
        self,
        max_concurrent_lookups: int = DEFAULT_MAX_CONCURRENT_LOOKUPS,
        resolver: Callable[..., list] = socket.getaddrinfo,
    ) -> None:
        self.resolver = resolver
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_concurrent_lookups),
            thread_name_prefix="dns-probe",
        )

    async def probe(self, endpoint: Endpoint) -> ProbeOutcome:
        started_at = perf_counter()

        try:
            host = endpoint.host
        except ValueError as e:
            return ProbeOutcome(status=CheckStatus.DOWN, response_time_ms=0, error=str(e))

        loop = asyncio.get_running_loop()
        lookup = partial(self.resolver, host, None, type=socket.SOCK_STREAM)

        try:
            addresses = await asyncio.wait_for(
                loop.run_in_executor(self._executor, lookup),
                timeout=endpoint.timeout_seconds,
            )
        except asyncio.TimeoutError:
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=elapsed_ms(started_at),
                error=f"DNS resolution of {host} timed out",
            )
        except (socket.gaierror, UnicodeError) as e:
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=elapsed_ms(started_at),
                error=f"DNS resolution of {host} failed: {e}",
            )

        if not addresses:
            return ProbeOutcome(
                status=CheckStatus.DOWN,
                response_time_ms=elapsed_ms(started_at),
                error=f"No addresses found for {host}",
            )

        return ProbeOutcome(status=CheckStatus.HEALTHY, response_time_ms=elapsed_ms(started_at))
