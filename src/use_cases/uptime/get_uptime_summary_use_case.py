from core.domain.uptime_summary import UptimeSummary
from core.port.clock import Clock
from core.port.result_store import ResultStore
from use_cases.uptime.compute_uptime_use_case import DEFAULT_WINDOW_DAYS, fetch_window


class GetUptimeSummaryUseCase:
    def __init__(self, result_store: ResultStore, clock: Clock) -> None:
        self.result_store = result_store
        self.clock = clock

    async def execute(self, endpoint_id: str, window_days: int = DEFAULT_WINDOW_DAYS) -> UptimeSummary:
        if window_days < 1:
            window_days = DEFAULT_WINDOW_DAYS

        results = await fetch_window(self.result_store, endpoint_id, window_days, self.clock.now())

        return UptimeSummary.from_results(endpoint_id, window_days, results)
