from enum import Enum


class CheckStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    DOWN = "down"

    @property
    def severity(self) -> int:
        mapping = {
            CheckStatus.DOWN: 2,
            CheckStatus.DEGRADED: 1,
            CheckStatus.HEALTHY: 0,
        }

        return mapping[self]
