from core.domain.check_result import CheckResult
from core.port.result_store import ResultStore


class RecordCheckResultUseCase:
    def __init__(self, result_store: ResultStore) -> None:
        self.result_store = result_store

    async def execute(self, result: CheckResult) -> None:
        await self.result_store.append_check_result(result)
