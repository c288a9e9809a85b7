from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit

from core.domain.probe_type import ProbeType
from core.domain.status_snapshot import EndpointStatusSnapshot

DEFAULT_SUCCESS_CODES = "200,201,204"

CHECK_FREQUENCY_RANGE = (1, 60)
TIMEOUT_RANGE = (5, 120)
RETRY_COUNT_RANGE = (0, 10)

_DEFAULT_PORTS = {"http": 80, "https": 443}


def parse_success_codes(raw: str | list[int] | None) -> list[int]:
    if raw is None:
        return []

    if isinstance(raw, str):
        candidates = raw.split(",")
    else:
        candidates = list(raw)

    codes = []
    for candidate in candidates:
        try:
            codes.append(int(str(candidate).strip()))
        except ValueError:
            continue

    return codes


def format_success_codes(codes: list[int]) -> str:
    return ",".join(str(code) for code in codes)


def _check_range(field_name: str, value: int, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{field_name} must be between {low} and {high}, got {value}")


@dataclass
class Endpoint:
    id: Optional[str]
    owner_id: str

    name: str
    target: str
    type: ProbeType = ProbeType.HTTP

    enabled: bool = True
    check_frequency_minutes: int = 5
    timeout_seconds: int = 30
    retry_count: int = 3
    success_codes: list[int] = field(default_factory=lambda: parse_success_codes(DEFAULT_SUCCESS_CODES))
    notify_on_failure: bool = True

    snapshot: Optional[EndpointStatusSnapshot] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Endpoint name must not be empty")

        if not self.target or not self.target.strip():
            raise ValueError("Endpoint target must not be empty")

        self.type = ProbeType.parse(self.type)
        self.success_codes = parse_success_codes(self.success_codes)

        _check_range("check_frequency_minutes", self.check_frequency_minutes, CHECK_FREQUENCY_RANGE)
        _check_range("timeout_seconds", self.timeout_seconds, TIMEOUT_RANGE)
        _check_range("retry_count", self.retry_count, RETRY_COUNT_RANGE)

    @property
    def host(self) -> str:
        host, _ = self._split_target()

        if not host:
            raise ValueError(f"Cannot extract host from target: {self.target}")

        return host

    def host_and_port(self) -> tuple[str, int]:
        host, port = self._split_target()

        if not host:
            raise ValueError(f"Cannot extract host from target: {self.target}")

        if port is None:
            raise ValueError(f"Target has no port: {self.target}")

        return host, port

    def _split_target(self) -> tuple[Optional[str], Optional[int]]:
        target = self.target.strip()
        if "://" not in target:
            target = f"//{target}"

        parsed = urlsplit(target)
        port = parsed.port or _DEFAULT_PORTS.get(parsed.scheme)

        return parsed.hostname, port
