import asyncio
import logging
from datetime import datetime
from typing import Optional

import structlog

from core.domain.check_result import CheckResult
from core.domain.check_status import CheckStatus
from core.domain.endpoint import Endpoint
from core.domain.session_state import SessionState
from core.domain.status_snapshot import EndpointStatusSnapshot, advance_snapshot
from core.port.clock import Clock
from core.port.endpoint_cache import EndpointCache
from core.port.failure_notifier import FailureNotifier
from core.port.scheduler import Scheduler
from infra.services.check_executor import CheckExecutor
from infra.utils.formatters import format_response_time
from use_cases.endpoint.get_enabled_endpoints_use_case import GetEnabledEndpointsUseCase
from use_cases.endpoint.record_check_result_use_case import RecordCheckResultUseCase

logger = structlog.stdlib.get_logger(__name__)

DEFAULT_CHECK_INTERVAL_SECONDS = 300
DEFAULT_RESYNC_INTERVAL_SECONDS = 1_800
DEFAULT_MAX_CONCURRENT_CHECKS = 10


class MonitoringSession:
    """Periodic checking of one subject's enabled endpoints.

    Two scheduler jobs drive the session: a check cycle that probes every loaded
    endpoint and a resync that reloads the endpoint set from storage. The loaded
    endpoints and their latest snapshots belong to this instance only; the
    result store is the sole point of consistency between sessions.

    Stopping only removes the jobs. A cycle already running still finishes and
    persists its results; ``wait_for_running_cycles`` lets the owner wait for it.
    """

    def __init__(
        self,
        subject_id: str,
        scheduler: Scheduler,
        executor: CheckExecutor,
        cache: EndpointCache,
        clock: Clock,
        get_enabled_endpoints_use_case: GetEnabledEndpointsUseCase,
        record_check_result_use_case: RecordCheckResultUseCase,
        failure_notifier: Optional[FailureNotifier] = None,
        check_interval_seconds: float = DEFAULT_CHECK_INTERVAL_SECONDS,
        resync_interval_seconds: float = DEFAULT_RESYNC_INTERVAL_SECONDS,
        max_concurrent_checks: int = DEFAULT_MAX_CONCURRENT_CHECKS,
    ):
        self.subject_id = subject_id
        self.scheduler = scheduler
        self.executor = executor
        self.cache = cache
        self.clock = clock

        self.get_enabled_endpoints_use_case = get_enabled_endpoints_use_case
        self.record_check_result_use_case = record_check_result_use_case
        self.failure_notifier = failure_notifier

        self.CHECK_INTERVAL_SECONDS = check_interval_seconds
        self.RESYNC_INTERVAL_SECONDS = resync_interval_seconds
        self.max_concurrent_checks = max(1, max_concurrent_checks)

        self._state = SessionState.IDLE
        self._snapshots: dict[str, EndpointStatusSnapshot] = {}
        self._last_cycle_at: Optional[datetime] = None
        self._running_cycles: set[asyncio.Task] = set()
        self._log = logger.bind(subject_id=subject_id)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def last_cycle_at(self) -> Optional[datetime]:
        return self._last_cycle_at

    @property
    def check_job_key(self) -> str:
        return f"check_cycle_subject_{self.subject_id}"

    @property
    def resync_job_key(self) -> str:
        return f"resync_subject_{self.subject_id}"

    async def endpoints(self) -> list[Endpoint]:
        return list((await self.cache.get_all()).values())

    def snapshots(self) -> dict[str, EndpointStatusSnapshot]:
        return dict(self._snapshots)

    def snapshot(self, endpoint_id: str) -> Optional[EndpointStatusSnapshot]:
        return self._snapshots.get(endpoint_id)

    async def start(self) -> None:
        if self._state is not SessionState.IDLE:
            self._log.warning(f"Monitoring session already {self._state.value}, ignoring start")
            return

        self._state = SessionState.LOADING

        self.scheduler.add_job(
            job_key=self.check_job_key,
            func=self.run_check_cycle,
            interval_seconds=self.CHECK_INTERVAL_SECONDS,
            job_name=f"Check endpoints of subject {self.subject_id}",
        )
        self.scheduler.add_job(
            job_key=self.resync_job_key,
            func=self.resync,
            interval_seconds=self.RESYNC_INTERVAL_SECONDS,
            job_name=f"Resync endpoints of subject {self.subject_id}",
        )

        await self.resync()

        # stop() may have run while the initial load was in flight
        if self._state is SessionState.LOADING:
            self._state = SessionState.ACTIVE
            self._log.info(
                f"Monitoring session started (check every {self.CHECK_INTERVAL_SECONDS}s, "
                f"resync every {self.RESYNC_INTERVAL_SECONDS}s)"
            )

    def stop(self) -> None:
        if self._state is SessionState.IDLE:
            return

        self.scheduler.remove_job(self.check_job_key)
        self.scheduler.remove_job(self.resync_job_key)

        self._state = SessionState.IDLE
        self._log.info("Monitoring session stopped")

    async def refresh_now(self) -> list[CheckResult]:
        await self.resync()

        return await self.run_check_cycle()

    async def resync(self) -> None:
        self._log.debug("Resyncing endpoints from storage")

        try:
            endpoints = await self.get_enabled_endpoints_use_case.execute(self.subject_id)
        except Exception as e:
            self._log.exception(f"Error loading endpoints from storage: {e}")
            return

        removed_ids = await self.cache.replace_all(endpoints)

        for endpoint_id in removed_ids:
            self._snapshots.pop(endpoint_id, None)

        for endpoint in endpoints:
            if endpoint.snapshot is None:
                continue

            current = self._snapshots.get(endpoint.id)
            if current is None or current.is_superseded_by(endpoint.snapshot.last_checked):
                self._snapshots[endpoint.id] = endpoint.snapshot

        self._log.info(f"Synced {len(endpoints)} enabled endpoints (removed: {len(removed_ids)})")

    async def run_check_cycle(self) -> list[CheckResult]:
        task = asyncio.current_task()
        if task is not None:
            self._running_cycles.add(task)

        try:
            return await self._check_loaded_endpoints()
        finally:
            self._running_cycles.discard(task)

    async def wait_for_running_cycles(self, timeout_seconds: float) -> bool:
        """Wait for cycles already in flight; ``False`` if some outlived ``timeout_seconds``."""
        running = [task for task in self._running_cycles if task is not asyncio.current_task()]

        if not running:
            return True

        _, pending = await asyncio.wait(running, timeout=timeout_seconds)

        if pending:
            self._log.warning(f"{len(pending)} check cycles still running after {timeout_seconds}s")
            return False

        return True

    async def _check_loaded_endpoints(self) -> list[CheckResult]:
        endpoints = await self.cache.get_all()

        if not endpoints:
            self._log.debug("No endpoints to check")
            self._last_cycle_at = self.clock.now()
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent_checks)

        async def check(endpoint: Endpoint) -> Optional[CheckResult]:
            async with semaphore:
                result = await self.executor.execute(endpoint)

            return await self._handle_result(result)

        results = await asyncio.gather(*[check(endpoint) for endpoint in endpoints.values()])
        kept = [result for result in results if result is not None]

        self._last_cycle_at = self.clock.now()

        healthy = len([result for result in kept if result.is_healthy])
        self._log.info(f"Check cycle finished: {healthy}/{len(kept)} endpoints healthy")

        return kept

    async def _handle_result(self, result: CheckResult) -> Optional[CheckResult]:
        endpoint = await self.cache.get(result.endpoint_id)

        if endpoint is None:
            self._log.debug(f"Dropping result for endpoint {result.endpoint_id} no longer loaded")
            return None

        try:
            await self.record_check_result_use_case.execute(result)
        except Exception as e:
            self._log.exception(f"Error persisting check result for '{endpoint.name}': {e}")

        previous = self._snapshots.get(result.endpoint_id)
        current = advance_snapshot(previous, result)
        self._snapshots[result.endpoint_id] = current

        log_level = logging.INFO if result.is_healthy else logging.WARNING
        self._log.log(
            log_level,
            f"Check '{endpoint.name}': "
            f"status={result.status.value}, "
            f"status_code={result.status_code}, "
            f"response_time={format_response_time(result.response_time_ms)}, "
            f"error={result.error}",
        )

        if current is not previous:
            await self._notify_transition(endpoint, previous, result)

        return result

    async def _notify_transition(
        self,
        endpoint: Endpoint,
        previous: Optional[EndpointStatusSnapshot],
        result: CheckResult,
    ) -> None:
        if self.failure_notifier is None or not endpoint.notify_on_failure:
            return

        was_down = previous is not None and previous.status is CheckStatus.DOWN
        is_down = result.status is CheckStatus.DOWN

        try:
            if is_down and not was_down:
                await self.failure_notifier.notify_failure(endpoint, result)
            elif was_down and not is_down:
                await self.failure_notifier.notify_recovery(endpoint, result)
        except Exception as e:
            self._log.exception(f"Error sending notification for '{endpoint.name}': {e}")
