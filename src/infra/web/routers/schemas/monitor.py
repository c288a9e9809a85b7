from datetime import datetime
from typing import Optional

from pydantic import Field

from core.domain.session_state import SessionState
from infra.web.routers.schemas import CamelModel
from infra.web.routers.schemas.endpoint import CheckResultResponseDTO, StatusSnapshotResponseDTO


class EndpointStatusResponseDTO(CamelModel):
    endpoint_id: str
    name: str
    target: str
    snapshot: Optional[StatusSnapshotResponseDTO] = None


class MonitoringSessionResponseDTO(CamelModel):
    subject_id: str
    state: SessionState
    last_cycle_at: Optional[datetime] = None
    endpoints: list[EndpointStatusResponseDTO] = Field(default_factory=list)


class RefreshResponseDTO(CamelModel):
    subject_id: str
    results: list[CheckResultResponseDTO] = Field(default_factory=list)
