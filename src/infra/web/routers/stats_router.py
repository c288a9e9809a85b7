import os
import time
from datetime import datetime, timezone
from typing import Any

import psutil
from fastapi import APIRouter, Request, Response, status

from infra.config.config import get_config
from infra.utils.formatters import format_bytes, format_time

router = APIRouter(prefix="/stats", tags=["Stats"])

_start_time: float = time.time()
_current_process: psutil.Process = psutil.Process(os.getpid())


def _active_session_count(request: Request) -> int:
    registry = getattr(request.app.state, "session_registry", None)

    if registry is None:
        return 0

    return len(registry.active_subjects())


@router.get(
    "/health",
    response_model=dict[str, Any],
    status_code=status.HTTP_200_OK,
    summary="Get application health status",
)
async def get_health(request: Request, response: Response):
    config = get_config()

    try:
        memory_info = _current_process.memory_full_info()

        return {
            "status": "UP",
            "uptime": format_time(time.time() - _start_time),
            "app_name": config.APP_NAME,
            "version": config.VERSION,
            "ram": format_bytes(memory_info.rss),
            "cpu_percent": _current_process.cpu_percent(interval=0.1),
            "active_monitoring_sessions": _active_session_count(request),
            "timestamp": datetime.now(timezone.utc),
        }

    except Exception as e:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

        return {
            "status": "DEGRADED",
            "error": str(e),
            "timestamp": datetime.now(timezone.utc),
        }
