from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional

JobFunc = Callable[..., Awaitable[Any]]


class Scheduler(ABC):
    @abstractmethod
    def start(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def add_job(
        self,
        job_key: str,
        func: JobFunc,
        interval_seconds: float,
        args: tuple = (),
        kwargs: Optional[dict] = None,
        job_name: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_job(self, job_key: str) -> bool:
        raise NotImplementedError
