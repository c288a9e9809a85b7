from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.check_result import CheckResult
from core.domain.check_status import CheckStatus


@dataclass(frozen=True)
class EndpointStatusSnapshot:
    endpoint_id: str
    status: CheckStatus
    last_checked: datetime
    last_response_time_ms: int

    @classmethod
    def from_result(cls, result: CheckResult) -> "EndpointStatusSnapshot":
        return cls(
            endpoint_id=result.endpoint_id,
            status=result.status,
            last_checked=result.checked_at,
            last_response_time_ms=result.response_time_ms,
        )

    def is_superseded_by(self, checked_at: datetime) -> bool:
        return checked_at >= self.last_checked


def advance_snapshot(
    current: Optional[EndpointStatusSnapshot],
    result: CheckResult,
) -> EndpointStatusSnapshot:
    """Return the snapshot after applying ``result``; older results never replace newer ones."""
    if current is None or current.is_superseded_by(result.checked_at):
        return EndpointStatusSnapshot.from_result(result)

    return current
