from core.port.endpoint_repository import EndpointRepository


class DeleteEndpointUseCase:
    def __init__(self, endpoint_repository: EndpointRepository) -> None:
        self.endpoint_repository = endpoint_repository

    async def execute(self, endpoint_id: str) -> bool:
        return await self.endpoint_repository.delete(endpoint_id)
