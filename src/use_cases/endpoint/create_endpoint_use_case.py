from typing import Optional

from core.domain.endpoint import Endpoint
from core.domain.subscription import Subscription
from core.exceptions.endpoint_limit_exceeded_error import EndpointLimitExceededError
from core.port.endpoint_repository import EndpointRepository
from infra.web.routers.schemas.endpoint import EndpointCreateDTO


class CreateEndpointUseCase:
    def __init__(self, endpoint_repository: EndpointRepository) -> None:
        self.endpoint_repository = endpoint_repository

    async def execute(self, endpoint: EndpointCreateDTO, subscription: Optional[Subscription] = None) -> Endpoint:
        subscription = subscription or Subscription()

        current_count = await self.endpoint_repository.count_by_owner(endpoint.owner_id)
        if not subscription.can_add_endpoint(current_count):
            raise EndpointLimitExceededError(endpoint.owner_id, subscription.endpoint_limit)

        endpoint_entity = Endpoint(
            id=None,
            owner_id=endpoint.owner_id,
            name=endpoint.name,
            target=endpoint.target,
            type=endpoint.type,
            enabled=endpoint.enabled,
            check_frequency_minutes=endpoint.check_frequency_minutes,
            timeout_seconds=endpoint.timeout_seconds,
            retry_count=endpoint.retry_count,
            success_codes=endpoint.success_codes,
            notify_on_failure=endpoint.notify_on_failure,
        )

        return await self.endpoint_repository.save(endpoint_entity)
