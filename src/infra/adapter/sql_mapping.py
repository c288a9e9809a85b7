from datetime import datetime, timezone
from typing import Optional

from core.domain.check_result import CheckResult
from core.domain.endpoint import Endpoint
from core.domain.status_snapshot import EndpointStatusSnapshot
from infra.db.models import CheckResultModel, EndpointModel


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is None:
        return None

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)

    return value.astimezone(timezone.utc)


def snapshot_from_model(model: EndpointModel) -> Optional[EndpointStatusSnapshot]:
    if model.current_status is None or model.last_checked is None:
        return None

    return EndpointStatusSnapshot(
        endpoint_id=model.id,
        status=model.current_status,
        last_checked=as_utc(model.last_checked),
        last_response_time_ms=model.last_response_time_ms or 0,
    )


def endpoint_from_model(model: EndpointModel) -> Endpoint:
    return Endpoint(
        id=model.id,
        owner_id=model.owner_id,
        name=model.name,
        target=model.target,
        type=model.type,
        enabled=model.enabled,
        check_frequency_minutes=model.check_frequency_minutes,
        timeout_seconds=model.timeout_seconds,
        retry_count=model.retry_count,
        success_codes=model.success_codes,
        notify_on_failure=model.notify_on_failure,
        snapshot=snapshot_from_model(model),
    )


def check_result_from_model(model: CheckResultModel) -> CheckResult:
    return CheckResult(
        endpoint_id=model.endpoint_id,
        status=model.status,
        response_time_ms=model.response_time_ms,
        checked_at=as_utc(model.checked_at),
        status_code=model.status_code,
        error=model.error_message,
    )
