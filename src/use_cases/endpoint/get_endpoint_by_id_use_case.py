from core.domain.endpoint import Endpoint
from core.exceptions.endpoint_not_found_error import EndpointNotFoundError
from core.port.endpoint_repository import EndpointRepository


class GetEndpointByIdUseCase:
    def __init__(self, endpoint_repository: EndpointRepository) -> None:
        self.endpoint_repository = endpoint_repository

    async def execute(self, endpoint_id: str) -> Endpoint:
        endpoint = await self.endpoint_repository.find_by_id(endpoint_id)

        if endpoint is None:
            raise EndpointNotFoundError(endpoint_id)

        return endpoint
