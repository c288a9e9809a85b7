from datetime import datetime
from typing import Annotated, Optional, Self

from pydantic import AfterValidator, Field, field_validator, model_validator

from core.domain.check_status import CheckStatus
from core.domain.endpoint import (
    CHECK_FREQUENCY_RANGE,
    DEFAULT_SUCCESS_CODES,
    RETRY_COUNT_RANGE,
    TIMEOUT_RANGE,
    format_success_codes,
)
from core.domain.probe_type import ProbeType
from infra.web.routers.schemas import CamelModel


def _non_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")

    return value


NonBlankStr = Annotated[str, AfterValidator(_non_blank)]


class EndpointCreateDTO(CamelModel):
    owner_id: str = Field(min_length=1)
    name: NonBlankStr
    target: NonBlankStr
    type: ProbeType = ProbeType.HTTP
    enabled: bool = True
    check_frequency_minutes: int = Field(default=5, ge=CHECK_FREQUENCY_RANGE[0], le=CHECK_FREQUENCY_RANGE[1])
    timeout_seconds: int = Field(default=30, ge=TIMEOUT_RANGE[0], le=TIMEOUT_RANGE[1])
    retry_count: int = Field(default=3, ge=RETRY_COUNT_RANGE[0], le=RETRY_COUNT_RANGE[1])
    success_codes: str = DEFAULT_SUCCESS_CODES
    notify_on_failure: bool = True

    @field_validator("type", mode="before")
    @classmethod
    def fallback_type(cls, value: Optional[str]) -> ProbeType:
        return ProbeType.parse(value)


class EndpointUpdateDTO(CamelModel):
    name: Optional[NonBlankStr] = None
    target: Optional[NonBlankStr] = None
    type: Optional[ProbeType] = None
    enabled: Optional[bool] = None
    check_frequency_minutes: Optional[int] = Field(
        default=None, ge=CHECK_FREQUENCY_RANGE[0], le=CHECK_FREQUENCY_RANGE[1]
    )
    timeout_seconds: Optional[int] = Field(default=None, ge=TIMEOUT_RANGE[0], le=TIMEOUT_RANGE[1])
    retry_count: Optional[int] = Field(default=None, ge=RETRY_COUNT_RANGE[0], le=RETRY_COUNT_RANGE[1])
    success_codes: Optional[str] = None
    notify_on_failure: Optional[bool] = None

    @field_validator("type", mode="before")
    @classmethod
    def fallback_type(cls, value: Optional[str]) -> Optional[ProbeType]:
        if value is None:
            return None

        return ProbeType.parse(value)

    @model_validator(mode="after")
    def check_update_fields(self) -> Self:
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be updated")

        return self


class StatusSnapshotResponseDTO(CamelModel):
    status: CheckStatus
    last_checked: datetime
    last_response_time_ms: int


class EndpointResponseDTO(CamelModel):
    id: str
    owner_id: str
    name: str
    target: str
    type: ProbeType
    enabled: bool
    check_frequency_minutes: int
    timeout_seconds: int
    retry_count: int
    success_codes: str
    notify_on_failure: bool
    snapshot: Optional[StatusSnapshotResponseDTO] = None

    @field_validator("success_codes", mode="before")
    @classmethod
    def join_success_codes(cls, value: str | list[int]) -> str:
        if isinstance(value, list):
            return format_success_codes(value)

        return value


class CheckResultResponseDTO(CamelModel):
    endpoint_id: str
    status: CheckStatus
    response_time_ms: int
    checked_at: datetime
    status_code: Optional[int] = None
    error: Optional[str] = None


class UptimeDaySummaryResponseDTO(CamelModel):
    date: datetime
    total_checks: int
    healthy_checks: int
    uptime: float
    avg_response_time_ms: int
    max_response_time_ms: int
    worst_status: CheckStatus


class UptimeSummaryResponseDTO(CamelModel):
    endpoint_id: str
    window_days: int
    total_checks: int
    healthy_checks: int
    degraded_checks: int
    down_checks: int
    uptime: float
    avg_response_time_ms: Optional[int] = None
    max_response_time_ms: Optional[int] = None
    incident_count: int
    daily: list[UptimeDaySummaryResponseDTO] = Field(default_factory=list)
