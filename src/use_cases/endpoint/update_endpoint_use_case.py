from dataclasses import replace

from core.domain.endpoint import Endpoint
from core.exceptions.endpoint_not_found_error import EndpointNotFoundError
from core.port.endpoint_repository import EndpointRepository
from infra.web.routers.schemas.endpoint import EndpointUpdateDTO


class UpdateEndpointUseCase:
    def __init__(self, endpoint_repository: EndpointRepository) -> None:
        self.endpoint_repository = endpoint_repository

    async def execute(self, endpoint_id: str, endpoint_data: EndpointUpdateDTO) -> Endpoint:
        endpoint = await self.endpoint_repository.find_by_id(endpoint_id)

        if not endpoint:
            raise EndpointNotFoundError(endpoint_id)

        updates = endpoint_data.model_dump(exclude_none=True)

        # replace() re-runs validation on the merged settings
        updated_endpoint = replace(endpoint, **updates)

        return await self.endpoint_repository.save(updated_endpoint)
