from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from core.port.clock import Clock
from core.port.result_store import ResultStore
from core.port.scheduler import Scheduler
from infra.adapter.dict_endpoint_cache import DictEndpointCache
from infra.adapter.local_scheduler import build_local_scheduler
from infra.adapter.logging_failure_notifier import LoggingFailureNotifier
from infra.adapter.postgres_result_store import get_result_store
from infra.adapter.system_clock import get_system_clock
from infra.config.config import MonitoringConfig, get_config
from infra.db.session import close_engine, create_database_schema
from infra.logging.config import configure_logging
from infra.probes import build_probe_registry
from infra.services.check_executor import CheckExecutor
from infra.services.monitoring_session import MonitoringSession
from infra.services.monitoring_session_registry import MonitoringSessionRegistry
from infra.web.routers.endpoint_router import router as endpoint_router
from infra.web.routers.monitor_router import router as monitor_router
from infra.web.routers.stats_router import router as stats_router
from use_cases.endpoint.get_enabled_endpoints_use_case import GetEnabledEndpointsUseCase
from use_cases.endpoint.record_check_result_use_case import RecordCheckResultUseCase


def build_session_registry(
    monitoring_config: MonitoringConfig,
    scheduler: Scheduler,
    http_client: httpx.AsyncClient,
    result_store: ResultStore,
    clock: Clock,
) -> MonitoringSessionRegistry:
    executor = CheckExecutor(
        probes=build_probe_registry(http_client, user_agent=monitoring_config.USER_AGENT),
        clock=clock,
        retry_backoff_seconds=monitoring_config.RETRY_BACKOFF_SECONDS,
    )
    failure_notifier = LoggingFailureNotifier()

    def session_factory(subject_id: str) -> MonitoringSession:
        return MonitoringSession(
            subject_id=subject_id,
            scheduler=scheduler,
            executor=executor,
            cache=DictEndpointCache(),
            clock=clock,
            get_enabled_endpoints_use_case=GetEnabledEndpointsUseCase(result_store),
            record_check_result_use_case=RecordCheckResultUseCase(result_store),
            failure_notifier=failure_notifier,
            check_interval_seconds=monitoring_config.CHECK_INTERVAL_SECONDS,
            resync_interval_seconds=monitoring_config.RESYNC_INTERVAL_SECONDS,
            max_concurrent_checks=monitoring_config.MAX_CONCURRENT_CHECKS,
        )

    return MonitoringSessionRegistry(session_factory)


def create_app() -> FastAPI:
    config = get_config()

    configure_logging(
        log_level=config.LOGGING_CONFIG.LEVEL,
        json_logs=config.LOGGING_CONFIG.JSON_FORMAT,
        service_name=config.APP_NAME,
        environment=config.ENVIRONMENT,
        library_log_levels=config.LOGGING_CONFIG.LIBRARY_LOG_LEVELS,
    )

    monitoring_config = config.MONITORING_CONFIG
    scheduler = build_local_scheduler()

    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(60.0),
        limits=httpx.Limits(
            max_keepalive_connections=20,
            max_connections=monitoring_config.HTTP_MAX_CONNECTIONS,
        ),
        follow_redirects=monitoring_config.HTTP_FOLLOW_REDIRECTS,
    )

    session_registry = build_session_registry(
        monitoring_config=monitoring_config,
        scheduler=scheduler,
        http_client=http_client,
        result_store=get_result_store(),
        clock=get_system_clock(),
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if config.ENVIRONMENT in ("loc", "dev"):
            await create_database_schema()

        scheduler.start()

        yield

        # running cycles still need the HTTP client and the engine
        await session_registry.stop_all(grace_seconds=monitoring_config.SHUTDOWN_GRACE_SECONDS)
        scheduler.stop()

        await http_client.aclose()
        await close_engine()

    app = FastAPI(
        title=config.APP_NAME,
        version=config.VERSION,
        root_path=config.ROOT_PATH,
        docs_url="/apidocs",
        lifespan=lifespan,
    )

    app.state.host = config.HOST
    app.state.port = config.PORT
    app.state.session_registry = session_registry

    app.include_router(stats_router)
    app.include_router(endpoint_router)
    app.include_router(monitor_router)

    return app
