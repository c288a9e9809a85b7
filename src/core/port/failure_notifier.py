from abc import ABC, abstractmethod

from core.domain.check_result import CheckResult
from core.domain.endpoint import Endpoint


class FailureNotifier(ABC):
    @abstractmethod
    async def notify_failure(self, endpoint: Endpoint, result: CheckResult) -> None:
        raise NotImplementedError

    @abstractmethod
    async def notify_recovery(self, endpoint: Endpoint, result: CheckResult) -> None:
        raise NotImplementedError
