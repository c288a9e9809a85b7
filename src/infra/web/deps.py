from fastapi import HTTPException, Request, status

from infra.services.monitoring_session import MonitoringSession
from infra.services.monitoring_session_registry import MonitoringSessionRegistry


def get_session_registry(request: Request) -> MonitoringSessionRegistry:
    registry = getattr(request.app.state, "session_registry", None)

    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Monitoring is not available",
        )

    return registry


def require_session(registry: MonitoringSessionRegistry, subject_id: str) -> MonitoringSession:
    session = registry.get(subject_id)

    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No monitoring session for subject")

    return session
