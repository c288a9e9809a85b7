from functools import lru_cache
from typing import Optional
from uuid import uuid4

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.endpoint import Endpoint, format_success_codes
from core.port.endpoint_repository import EndpointRepository
from infra.adapter.sql_mapping import endpoint_from_model
from infra.db.models import EndpointModel
from infra.db.session import get_session_factory


class PostgresEndpointRepository(EndpointRepository):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._session_factory = session_factory

    async def save(self, endpoint: Endpoint) -> Endpoint:
        async with self._session_factory() as session:
            model: Optional[EndpointModel] = None

            if endpoint.id:
                model = await session.get(EndpointModel, endpoint.id)

            if model is None:
                model = EndpointModel(
                    id=endpoint.id or str(uuid4()),
                    owner_id=endpoint.owner_id,
                    name=endpoint.name,
                    target=endpoint.target,
                )
                session.add(model)

            # snapshot columns are owned by the result store and never written here
            model.owner_id = endpoint.owner_id
            model.name = endpoint.name
            model.target = endpoint.target
            model.type = endpoint.type.value
            model.enabled = endpoint.enabled
            model.check_frequency_minutes = endpoint.check_frequency_minutes
            model.timeout_seconds = endpoint.timeout_seconds
            model.retry_count = endpoint.retry_count
            model.success_codes = format_success_codes(endpoint.success_codes)
            model.notify_on_failure = endpoint.notify_on_failure

            await session.commit()
            await session.refresh(model)

            return endpoint_from_model(model)

    async def find_by_id(self, endpoint_id: str) -> Optional[Endpoint]:
        async with self._session_factory() as session:
            statement = select(EndpointModel).where(EndpointModel.id == endpoint_id)

            model = (await session.execute(statement)).scalar_one_or_none()

            return endpoint_from_model(model) if model is not None else None

    async def find_all_by_owner(self, owner_id: str) -> list[Endpoint]:
        async with self._session_factory() as session:
            statement = (
                select(EndpointModel)
                .where(EndpointModel.owner_id == owner_id)
                .order_by(EndpointModel.created_at.asc(), EndpointModel.id.asc())
            )

            models = (await session.execute(statement)).scalars().all()

            return [endpoint_from_model(model) for model in models]

    async def count_by_owner(self, owner_id: str) -> int:
        async with self._session_factory() as session:
            statement = select(func.count(EndpointModel.id)).where(EndpointModel.owner_id == owner_id)

            return (await session.execute(statement)).scalar_one()

    async def delete(self, endpoint_id: str) -> bool:
        async with self._session_factory() as session:
            statement = delete(EndpointModel).where(EndpointModel.id == endpoint_id)

            result = await session.execute(statement)
            await session.commit()

            return result.rowcount == 1  # type: ignore


@lru_cache
def get_endpoint_repository() -> EndpointRepository:
    session_factory = get_session_factory()

    return PostgresEndpointRepository(session_factory)
