from core.domain.endpoint import Endpoint
from core.port.result_store import ResultStore


class GetEnabledEndpointsUseCase:
    def __init__(self, result_store: ResultStore):
        self.result_store = result_store

    async def execute(self, subject_id: str) -> list[Endpoint]:
        return await self.result_store.list_enabled_endpoints(subject_id)
