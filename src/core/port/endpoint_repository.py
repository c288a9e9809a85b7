from abc import ABC, abstractmethod
from typing import Optional

from core.domain.endpoint import Endpoint


class EndpointRepository(ABC):
    @abstractmethod
    async def save(self, endpoint: Endpoint) -> Endpoint:
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, endpoint_id: str) -> Optional[Endpoint]:
        raise NotImplementedError

    @abstractmethod
    async def find_all_by_owner(self, owner_id: str) -> list[Endpoint]:
        raise NotImplementedError

    @abstractmethod
    async def count_by_owner(self, owner_id: str) -> int:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, endpoint_id: str) -> bool:
        raise NotImplementedError
