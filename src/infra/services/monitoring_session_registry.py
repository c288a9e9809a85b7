import asyncio
from typing import Callable, Optional

import structlog

from core.domain.session_state import SessionState
from infra.services.monitoring_session import MonitoringSession

logger = structlog.stdlib.get_logger(__name__)

SessionFactory = Callable[[str], MonitoringSession]

DEFAULT_SHUTDOWN_GRACE_SECONDS = 30.0


class MonitoringSessionRegistry:
    """Tracks the monitoring sessions of one application instance, at most one per subject."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory
        self._sessions: dict[str, MonitoringSession] = {}

    def get(self, subject_id: str) -> Optional[MonitoringSession]:
        return self._sessions.get(subject_id)

    def active_subjects(self) -> list[str]:
        return [
            subject_id
            for subject_id, session in self._sessions.items()
            if session.state is not SessionState.IDLE
        ]

    async def activate(self, subject_id: str) -> MonitoringSession:
        session = self._sessions.get(subject_id)

        if session is None:
            session = self._session_factory(subject_id)
            self._sessions[subject_id] = session

        if session.state is SessionState.IDLE:
            await session.start()

        return session

    def deactivate(self, subject_id: str) -> bool:
        session = self._sessions.pop(subject_id, None)

        if session is None:
            return False

        session.stop()
        return True

    async def stop_all(self, grace_seconds: float = DEFAULT_SHUTDOWN_GRACE_SECONDS) -> bool:
        """Stop every session, then wait up to ``grace_seconds`` for their running cycles.

        Returns ``False`` when some cycle was still running once the grace period ran out.
        """
        sessions = list(self._sessions.values())

        for subject_id in list(self._sessions):
            self.deactivate(subject_id)

        if not sessions:
            return True

        drained = await asyncio.gather(
            *[session.wait_for_running_cycles(grace_seconds) for session in sessions]
        )

        logger.info(f"All monitoring sessions stopped ({len(sessions)} sessions)")
        return all(drained)
