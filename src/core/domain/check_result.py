from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.check_status import CheckStatus


@dataclass(frozen=True)
class ProbeOutcome:
    status: CheckStatus
    response_time_ms: int
    status_code: Optional[int] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class CheckResult:
    endpoint_id: str
    status: CheckStatus
    response_time_ms: int
    checked_at: datetime
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_healthy(self) -> bool:
        return self.status is CheckStatus.HEALTHY

    @classmethod
    def from_outcome(cls, endpoint_id: str, outcome: ProbeOutcome, checked_at: datetime) -> "CheckResult":
        return cls(
            endpoint_id=endpoint_id,
            status=outcome.status,
            response_time_ms=outcome.response_time_ms,
            checked_at=checked_at,
            status_code=outcome.status_code,
            error=outcome.error,
        )
