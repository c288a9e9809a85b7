import structlog

from core.domain.check_result import CheckResult
from core.domain.endpoint import Endpoint
from core.port.failure_notifier import FailureNotifier

logger = structlog.stdlib.get_logger(__name__)


class LoggingFailureNotifier(FailureNotifier):
    """Emits endpoint state transitions as structured log events for the log pipeline to route."""

    async def notify_failure(self, endpoint: Endpoint, result: CheckResult) -> None:
        logger.warning(
            "endpoint_down",
            endpoint_id=endpoint.id,
            owner_id=endpoint.owner_id,
            endpoint_name=endpoint.name,
            target=endpoint.target,
            status_code=result.status_code,
            error=result.error,
            checked_at=result.checked_at.isoformat(),
        )

    async def notify_recovery(self, endpoint: Endpoint, result: CheckResult) -> None:
        logger.info(
            "endpoint_recovered",
            endpoint_id=endpoint.id,
            owner_id=endpoint.owner_id,
            endpoint_name=endpoint.name,
            status=result.status.value,
            response_time_ms=result.response_time_ms,
            checked_at=result.checked_at.isoformat(),
        )
