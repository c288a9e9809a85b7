from dataclasses import dataclass

FREE_ENDPOINT_LIMIT = 3
ENDPOINTS_PER_ADDON = 5


@dataclass(frozen=True)
class Subscription:
    status: str = "inactive"
    endpoint_addons: int = 0
    free_endpoint_limit: int = FREE_ENDPOINT_LIMIT
    endpoints_per_addon: int = ENDPOINTS_PER_ADDON

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def endpoint_limit(self) -> int:
        if not self.is_active:
            return self.free_endpoint_limit

        return self.free_endpoint_limit + max(self.endpoint_addons, 0) * self.endpoints_per_addon

    def can_add_endpoint(self, current_count: int) -> bool:
        return current_count < self.endpoint_limit
