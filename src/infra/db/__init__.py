from infra.db.models import Base, CheckResultModel, EndpointModel
from infra.db.session import (
    build_database_url,
    close_engine,
    create_database_schema,
    get_engine,
    get_session_factory,
    session_scope,
)

__all__ = [
    "Base",
    "CheckResultModel",
    "EndpointModel",
    "build_database_url",
    "close_engine",
    "create_database_schema",
    "get_engine",
    "get_session_factory",
    "session_scope",
]
