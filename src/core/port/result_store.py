from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from core.domain.check_result import CheckResult
from core.domain.endpoint import Endpoint
from core.domain.status_snapshot import EndpointStatusSnapshot


class ResultStore(ABC):
    @abstractmethod
    async def list_enabled_endpoints(self, subject_id: str) -> list[Endpoint]:
        raise NotImplementedError

    @abstractmethod
    async def append_check_result(self, result: CheckResult) -> None:
        """Record ``result`` and update the endpoint snapshot in one atomic write.

        The snapshot must not move backwards in time when results arrive out of order.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_check_results(self, endpoint_id: str, since: datetime) -> list[CheckResult]:
        raise NotImplementedError

    @abstractmethod
    async def get_snapshot(self, endpoint_id: str) -> Optional[EndpointStatusSnapshot]:
        raise NotImplementedError
