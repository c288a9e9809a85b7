from core.domain.endpoint import Endpoint
from core.port.endpoint_repository import EndpointRepository


class GetEndpointsByOwnerUseCase:
    def __init__(self, endpoint_repository: EndpointRepository) -> None:
        self.endpoint_repository = endpoint_repository

    async def execute(self, owner_id: str) -> list[Endpoint]:
        return await self.endpoint_repository.find_all_by_owner(owner_id)
