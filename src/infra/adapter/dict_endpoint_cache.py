import asyncio
from typing import Optional

from core.domain.endpoint import Endpoint
from core.port.endpoint_cache import EndpointCache


class DictEndpointCache(EndpointCache):
    """Endpoint set owned by a single monitoring session."""

    def __init__(self) -> None:
        self._endpoints: dict[str, Endpoint] = {}
        self._lock = asyncio.Lock()

    async def get(self, endpoint_id: str) -> Optional[Endpoint]:
        async with self._lock:
            return self._endpoints.get(endpoint_id)

    async def get_all(self) -> dict[str, Endpoint]:
        async with self._lock:
            return self._endpoints.copy()

    async def replace_all(self, endpoints: list[Endpoint]) -> set[str]:
        async with self._lock:
            incoming = {endpoint.id: endpoint for endpoint in endpoints if endpoint.id is not None}
            removed_ids = set(self._endpoints) - set(incoming)

            self._endpoints = incoming

            return removed_ids
