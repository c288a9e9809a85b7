from abc import ABC, abstractmethod
from typing import Optional

from core.domain.endpoint import Endpoint


class EndpointCache(ABC):

    @abstractmethod
    async def get(self, endpoint_id: str) -> Optional[Endpoint]:
        raise NotImplementedError

    @abstractmethod
    async def get_all(self) -> dict[str, Endpoint]:
        raise NotImplementedError

    @abstractmethod
    async def replace_all(self, endpoints: list[Endpoint]) -> set[str]:
        """Swap the cached set for ``endpoints`` and return the ids that were dropped."""
        raise NotImplementedError
