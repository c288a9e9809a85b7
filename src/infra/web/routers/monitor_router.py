from fastapi import APIRouter, Depends, status

from infra.services.monitoring_session import MonitoringSession
from infra.services.monitoring_session_registry import MonitoringSessionRegistry
from infra.web.deps import get_session_registry, require_session
from infra.web.routers.schemas.endpoint import CheckResultResponseDTO, StatusSnapshotResponseDTO
from infra.web.routers.schemas.monitor import (
    EndpointStatusResponseDTO,
    MonitoringSessionResponseDTO,
    RefreshResponseDTO,
)

router = APIRouter(prefix="/monitor", tags=["Monitor"])


async def _describe(session: MonitoringSession) -> MonitoringSessionResponseDTO:
    snapshots = session.snapshots()
    endpoints = [
        EndpointStatusResponseDTO(
            endpoint_id=endpoint.id,
            name=endpoint.name,
            target=endpoint.target,
            snapshot=(
                StatusSnapshotResponseDTO.model_validate(snapshots[endpoint.id])
                if endpoint.id in snapshots
                else None
            ),
        )
        for endpoint in await session.endpoints()
    ]

    return MonitoringSessionResponseDTO(
        subject_id=session.subject_id,
        state=session.state,
        last_cycle_at=session.last_cycle_at,
        endpoints=endpoints,
    )


@router.post(
    "/{subject_id}/start",
    response_model=MonitoringSessionResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def start_monitoring(
    subject_id: str,
    registry: MonitoringSessionRegistry = Depends(get_session_registry),
) -> MonitoringSessionResponseDTO:
    session = await registry.activate(subject_id)

    return await _describe(session)


@router.post(
    "/{subject_id}/stop",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def stop_monitoring(
    subject_id: str,
    registry: MonitoringSessionRegistry = Depends(get_session_registry),
) -> None:
    registry.deactivate(subject_id)


@router.post(
    "/{subject_id}/refresh",
    response_model=RefreshResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def refresh_monitoring(
    subject_id: str,
    registry: MonitoringSessionRegistry = Depends(get_session_registry),
) -> RefreshResponseDTO:
    session = require_session(registry, subject_id)
    results = await session.refresh_now()

    return RefreshResponseDTO(
        subject_id=subject_id,
        results=[CheckResultResponseDTO.model_validate(result) for result in results],
    )


@router.get(
    "/{subject_id}",
    response_model=MonitoringSessionResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_monitoring_session(
    subject_id: str,
    registry: MonitoringSessionRegistry = Depends(get_session_registry),
) -> MonitoringSessionResponseDTO:
    session = require_session(registry, subject_id)

    return await _describe(session)
