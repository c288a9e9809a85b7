class EndpointNotFoundError(Exception):
    def __init__(self, endpoint_id: str):
        self.endpoint_id = endpoint_id
        super().__init__(f"Endpoint '{endpoint_id}' not found")
