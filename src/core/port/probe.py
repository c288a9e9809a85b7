from abc import ABC, abstractmethod

from core.domain.check_result import ProbeOutcome
from core.domain.endpoint import Endpoint


class Probe(ABC):
    """One probing strategy. Implementations report every failure as a ``down`` outcome."""

    @abstractmethod
    async def probe(self, endpoint: Endpoint) -> ProbeOutcome:
        raise NotImplementedError
