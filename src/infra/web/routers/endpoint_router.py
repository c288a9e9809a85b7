from fastapi import APIRouter, HTTPException, Query, status

from core.domain.check_result import CheckResult
from core.domain.endpoint import Endpoint
from core.domain.subscription import Subscription
from core.domain.uptime_summary import UptimeSummary
from core.exceptions.endpoint_limit_exceeded_error import EndpointLimitExceededError
from core.exceptions.endpoint_not_found_error import EndpointNotFoundError
from infra.adapter.postgres_endpoint_repository import get_endpoint_repository
from infra.adapter.postgres_result_store import get_result_store
from infra.adapter.system_clock import get_system_clock
from infra.config.config import get_config
from infra.web.routers.schemas.endpoint import (
    CheckResultResponseDTO,
    EndpointCreateDTO,
    EndpointResponseDTO,
    EndpointUpdateDTO,
    UptimeSummaryResponseDTO,
)
from use_cases.endpoint.create_endpoint_use_case import CreateEndpointUseCase
from use_cases.endpoint.delete_endpoint_use_case import DeleteEndpointUseCase
from use_cases.endpoint.get_check_history_use_case import GetCheckHistoryUseCase
from use_cases.endpoint.get_endpoint_by_id_use_case import GetEndpointByIdUseCase
from use_cases.endpoint.get_endpoints_by_owner_use_case import GetEndpointsByOwnerUseCase
from use_cases.endpoint.update_endpoint_use_case import UpdateEndpointUseCase
from use_cases.uptime.get_uptime_summary_use_case import GetUptimeSummaryUseCase

router = APIRouter(prefix="/endpoint", tags=["Endpoint"])


def _subscription(subscription_status: str, endpoint_addons: int) -> Subscription:
    subscription_config = get_config().SUBSCRIPTION_CONFIG

    return Subscription(
        status=subscription_status,
        endpoint_addons=endpoint_addons,
        free_endpoint_limit=subscription_config.FREE_ENDPOINT_LIMIT,
        endpoints_per_addon=subscription_config.ENDPOINTS_PER_ADDON,
    )


@router.post(
    "",
    response_model=EndpointResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_endpoint(
    payload: EndpointCreateDTO,
    subscription_status: str = Query(default="inactive", alias="subscriptionStatus"),
    endpoint_addons: int = Query(default=0, ge=0, alias="endpointAddons"),
) -> Endpoint:
    use_case = CreateEndpointUseCase(get_endpoint_repository())

    try:
        return await use_case.execute(payload, _subscription(subscription_status, endpoint_addons))
    except EndpointLimitExceededError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Endpoint limit of {e.limit} reached for this subscription",
        )


@router.get(
    "",
    response_model=list[EndpointResponseDTO],
    status_code=status.HTTP_200_OK,
)
async def get_endpoints(owner_id: str = Query(..., alias="ownerId", min_length=1)) -> list[Endpoint]:
    use_case = GetEndpointsByOwnerUseCase(get_endpoint_repository())

    return await use_case.execute(owner_id)


@router.get(
    "/{endpoint_id}",
    response_model=EndpointResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_endpoint(endpoint_id: str) -> Endpoint:
    use_case = GetEndpointByIdUseCase(get_endpoint_repository())

    try:
        return await use_case.execute(endpoint_id)
    except EndpointNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Endpoint not found")


@router.patch(
    "/{endpoint_id}",
    response_model=EndpointResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def update_endpoint(endpoint_id: str, payload: EndpointUpdateDTO) -> Endpoint:
    use_case = UpdateEndpointUseCase(get_endpoint_repository())

    try:
        return await use_case.execute(endpoint_id=endpoint_id, endpoint_data=payload)
    except EndpointNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Endpoint not found")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.delete(
    "/{endpoint_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_endpoint(endpoint_id: str) -> None:
    use_case = DeleteEndpointUseCase(get_endpoint_repository())
    await use_case.execute(endpoint_id)


@router.get(
    "/{endpoint_id}/uptime",
    response_model=UptimeSummaryResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_endpoint_uptime(
    endpoint_id: str,
    window_days: int | None = Query(default=None, ge=1, le=365, alias="windowDays"),
) -> UptimeSummary:
    use_case = GetUptimeSummaryUseCase(get_result_store(), get_system_clock())

    return await use_case.execute(
        endpoint_id=endpoint_id,
        window_days=window_days or get_config().MONITORING_CONFIG.UPTIME_WINDOW_DAYS,
    )


@router.get(
    "/{endpoint_id}/checks",
    response_model=list[CheckResultResponseDTO],
    status_code=status.HTTP_200_OK,
)
async def get_endpoint_checks(
    endpoint_id: str,
    since_hours: int = Query(default=24, ge=1, le=24 * 365, alias="sinceHours"),
) -> list[CheckResult]:
    use_case = GetCheckHistoryUseCase(get_result_store(), get_system_clock())

    return await use_case.execute(endpoint_id=endpoint_id, since_hours=since_hours)
