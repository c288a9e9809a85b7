from datetime import timedelta

from core.domain.check_result import CheckResult
from core.port.clock import Clock
from core.port.result_store import ResultStore


class GetCheckHistoryUseCase:
    def __init__(self, result_store: ResultStore, clock: Clock) -> None:
        self.result_store = result_store
        self.clock = clock

    async def execute(self, endpoint_id: str, since_hours: int = 24) -> list[CheckResult]:
        if since_hours < 1:
            since_hours = 24

        since = self.clock.now() - timedelta(hours=since_hours)

        return await self.result_store.list_check_results(endpoint_id, since)
