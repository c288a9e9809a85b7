from enum import Enum
from typing import Optional


class ProbeType(str, Enum):
    HTTP = "http"
    HTTPS = "https"
    HTTPS_SSL = "https-ssl"
    API_HEALTH = "api-health"
    TCP = "tcp"
    PING = "ping"
    DNS = "dns"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ProbeType":
        """Unknown or empty values fall back to plain HTTP."""
        if isinstance(value, ProbeType):
            return value

        normalized = (value or "").strip().lower()

        try:
            return cls(normalized)
        except ValueError:
            return cls.HTTP
