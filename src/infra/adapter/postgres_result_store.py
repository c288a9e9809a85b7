from datetime import datetime
from functools import lru_cache
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.check_result import CheckResult
from core.domain.endpoint import Endpoint
from core.domain.status_snapshot import EndpointStatusSnapshot
from core.port.result_store import ResultStore
from infra.adapter.sql_mapping import check_result_from_model, endpoint_from_model, snapshot_from_model
from infra.db.models import CheckResultModel, EndpointModel
from infra.db.session import get_session_factory


class PostgresResultStore(ResultStore):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._session_factory = session_factory

    async def list_enabled_endpoints(self, subject_id: str) -> list[Endpoint]:
        async with self._session_factory() as session:
            statement = (
                select(EndpointModel)
                .where(EndpointModel.owner_id == subject_id)
                .where(EndpointModel.enabled.is_(True))
                .order_by(EndpointModel.created_at.asc(), EndpointModel.id.asc())
            )

            models = (await session.execute(statement)).scalars().all()

            return [endpoint_from_model(model) for model in models]

    async def append_check_result(self, result: CheckResult) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(
                    CheckResultModel(
                        endpoint_id=result.endpoint_id,
                        status=result.status,
                        response_time_ms=result.response_time_ms,
                        checked_at=result.checked_at,
                        status_code=result.status_code,
                        error_message=result.error,
                    )
                )

                await session.execute(
                    update(EndpointModel)
                    .where(EndpointModel.id == result.endpoint_id)
                    .where(
                        or_(
                            EndpointModel.last_checked.is_(None),
                            EndpointModel.last_checked <= result.checked_at,
                        )
                    )
                    .values(
                        current_status=result.status,
                        last_checked=result.checked_at,
                        last_response_time_ms=result.response_time_ms,
                    )
                    .execution_options(synchronize_session=False)
                )

    async def list_check_results(self, endpoint_id: str, since: datetime) -> list[CheckResult]:
        async with self._session_factory() as session:
            statement = (
                select(CheckResultModel)
                .where(CheckResultModel.endpoint_id == endpoint_id)
                .where(CheckResultModel.checked_at >= since)
                .order_by(CheckResultModel.checked_at.asc(), CheckResultModel.id.asc())
            )

            models = (await session.execute(statement)).scalars().all()

            return [check_result_from_model(model) for model in models]

    async def get_snapshot(self, endpoint_id: str) -> Optional[EndpointStatusSnapshot]:
        async with self._session_factory() as session:
            model = await session.get(EndpointModel, endpoint_id)

            return snapshot_from_model(model) if model is not None else None


@lru_cache
def get_result_store() -> ResultStore:
    session_factory = get_session_factory()

    return PostgresResultStore(session_factory)
