from datetime import datetime, timedelta

from core.domain.check_result import CheckResult
from core.domain.check_status import CheckStatus
from core.domain.uptime_summary import uptime_percentage
from core.port.clock import Clock
from core.port.result_store import ResultStore

DEFAULT_WINDOW_DAYS = 30


async def fetch_window(
    result_store: ResultStore,
    endpoint_id: str,
    window_days: int,
    now: datetime,
) -> list[CheckResult]:
    since = now - timedelta(days=window_days)
    results = await result_store.list_check_results(endpoint_id, since)

    return [result for result in results if since <= result.checked_at <= now]


class ComputeUptimeUseCase:
    def __init__(self, result_store: ResultStore, clock: Clock) -> None:
        self.result_store = result_store
        self.clock = clock

    async def execute(self, endpoint_id: str, window_days: int = DEFAULT_WINDOW_DAYS) -> float:
        results = await fetch_window(self.result_store, endpoint_id, window_days, self.clock.now())

        healthy_checks = len([result for result in results if result.status is CheckStatus.HEALTHY])

        return uptime_percentage(healthy_checks, len(results))
