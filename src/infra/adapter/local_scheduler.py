from typing import Optional

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from core.port.scheduler import JobFunc, Scheduler

logger = structlog.stdlib.get_logger(__name__)


class LocalScheduler(Scheduler):
    def __init__(self, scheduler: BaseScheduler) -> None:
        self.scheduler = scheduler
        self._jobs: dict[str, str] = {}
        self._running = False

    def start(self) -> None:
        if self._running:
            return

        self.scheduler.start()
        self._running = True

    def stop(self) -> None:
        if not self._running:
            return

        # queued firings are dropped; jobs already executing finish on the event loop
        self.scheduler.shutdown(wait=False)
        self._running = False
        self._jobs.clear()

    def add_job(
        self,
        job_key: str,
        func: JobFunc,
        interval_seconds: float,
        args: tuple = (),
        kwargs: Optional[dict] = None,
        job_name: Optional[str] = None,
    ) -> None:
        if job_key in self._jobs:
            self.remove_job(job_key)

        job = self.scheduler.add_job(
            func=func,
            trigger=IntervalTrigger(seconds=interval_seconds),
            args=args,
            kwargs=kwargs or {},
            id=job_key,
            name=job_name or job_key,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        self._jobs[job_key] = job.id

    def remove_job(self, job_key: str) -> bool:
        job_id = self._jobs.pop(job_key, None)

        if job_id is None:
            return False

        try:
            self.scheduler.remove_job(job_id)
        except Exception as e:
            logger.warning(f"Could not remove scheduled job '{job_key}': {e}")
            return False

        return True


def build_local_scheduler() -> Scheduler:
    """New scheduler per application; its lifespan owns start and stop."""
    return LocalScheduler(AsyncIOScheduler())
