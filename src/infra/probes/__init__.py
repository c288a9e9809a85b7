import httpx

from core.domain.probe_type import ProbeType
from core.port.probe import Probe
from infra.probes.dns_probe import DnsProbe
from infra.probes.http_probe import DEFAULT_USER_AGENT, HttpProbe
from infra.probes.ping_probe import PingProbe
from infra.probes.tcp_probe import TcpProbe


def build_probe_registry(
    http_client: httpx.AsyncClient,
    user_agent: str = DEFAULT_USER_AGENT,
) -> dict[ProbeType, Probe]:
    http_probe = HttpProbe(http_client, user_agent=user_agent)

    return {
        ProbeType.HTTP: http_probe,
        ProbeType.HTTPS: http_probe,
        ProbeType.HTTPS_SSL: http_probe,
        ProbeType.API_HEALTH: http_probe,
        ProbeType.TCP: TcpProbe(),
        ProbeType.PING: PingProbe(),
        ProbeType.DNS: DnsProbe(),
    }


__all__ = [
    "DnsProbe",
    "HttpProbe",
    "PingProbe",
    "TcpProbe",
    "build_probe_registry",
]
