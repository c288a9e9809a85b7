class EndpointLimitExceededError(Exception):
    def __init__(self, owner_id: str, limit: int):
        self.owner_id = owner_id
        self.limit = limit
        super().__init__(f"Owner '{owner_id}' already has the maximum of {limit} endpoints")
