from use_cases.endpoint.create_endpoint_use_case import CreateEndpointUseCase
from use_cases.endpoint.delete_endpoint_use_case import DeleteEndpointUseCase
from use_cases.endpoint.get_check_history_use_case import GetCheckHistoryUseCase
from use_cases.endpoint.get_enabled_endpoints_use_case import GetEnabledEndpointsUseCase
from use_cases.endpoint.get_endpoint_by_id_use_case import GetEndpointByIdUseCase
from use_cases.endpoint.get_endpoints_by_owner_use_case import GetEndpointsByOwnerUseCase
from use_cases.endpoint.record_check_result_use_case import RecordCheckResultUseCase
from use_cases.endpoint.update_endpoint_use_case import UpdateEndpointUseCase

__all__ = [
    "CreateEndpointUseCase",
    "DeleteEndpointUseCase",
    "GetCheckHistoryUseCase",
    "GetEnabledEndpointsUseCase",
    "GetEndpointByIdUseCase",
    "GetEndpointsByOwnerUseCase",
    "RecordCheckResultUseCase",
    "UpdateEndpointUseCase",
]
