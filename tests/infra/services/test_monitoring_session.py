import asyncio
from datetime import timedelta

import pytest

from core.domain.check_result import ProbeOutcome
from core.domain.check_status import CheckStatus
from core.domain.endpoint import Endpoint
from core.domain.probe_type import ProbeType
from core.domain.session_state import SessionState
from core.port.probe import Probe
from infra.adapter.dict_endpoint_cache import DictEndpointCache
from infra.services.check_executor import CheckExecutor
from infra.services.monitoring_session import MonitoringSession
from tests.support.fakes import (
    BASE_TIME,
    FailingResultStore,
    FakeClock,
    FakeEndpointRepository,
    FakeFailureNotifier,
    FakeProbe,
    FakeResultStore,
    FakeScheduler,
    down,
    healthy,
    make_endpoint,
    with_snapshot,
)
from use_cases.endpoint.get_enabled_endpoints_use_case import GetEnabledEndpointsUseCase
from use_cases.endpoint.record_check_result_use_case import RecordCheckResultUseCase


async def _no_sleep(_: float) -> None:
    return None


def _session(
    result_store: FakeResultStore,
    probe: Probe,
    *,
    notifier: FakeFailureNotifier | None = None,
    clock: FakeClock | None = None,
    max_concurrent_checks: int = 10,
) -> tuple[MonitoringSession, FakeScheduler, DictEndpointCache]:
    clock = clock or FakeClock()
    scheduler = FakeScheduler()
    cache = DictEndpointCache()

    session = MonitoringSession(
        subject_id="owner-1",
        scheduler=scheduler,
        executor=CheckExecutor(probes={ProbeType.HTTP: probe}, clock=clock, sleep=_no_sleep),
        cache=cache,
        clock=clock,
        get_enabled_endpoints_use_case=GetEnabledEndpointsUseCase(result_store),
        record_check_result_use_case=RecordCheckResultUseCase(result_store),
        failure_notifier=notifier,
        check_interval_seconds=60,
        resync_interval_seconds=600,
        max_concurrent_checks=max_concurrent_checks,
    )

    return session, scheduler, cache


def _store(*endpoints: Endpoint) -> FakeResultStore:
    return FakeResultStore(FakeEndpointRepository(initial_endpoints=list(endpoints)))


@pytest.mark.asyncio
async def test_start_registers_jobs_and_loads_enabled_endpoints() -> None:
    result_store = _store(make_endpoint("ep-1"), make_endpoint("ep-2", enabled=False))
    session, scheduler, cache = _session(result_store, FakeProbe())

    await session.start()

    assert session.state is SessionState.ACTIVE
    assert scheduler.jobs["check_cycle_subject_owner-1"]["interval_seconds"] == 60
    assert scheduler.jobs["resync_subject_owner-1"]["interval_seconds"] == 600
    assert set(await cache.get_all()) == {"ep-1"}


@pytest.mark.asyncio
async def test_start_twice_is_a_no_op() -> None:
    result_store = _store(make_endpoint("ep-1"))
    session, _, _ = _session(result_store, FakeProbe())

    await session.start()
    await session.start()

    assert result_store.list_enabled_calls == ["owner-1"]


@pytest.mark.asyncio
async def test_stop_removes_jobs_and_goes_idle() -> None:
    session, scheduler, _ = _session(_store(make_endpoint("ep-1")), FakeProbe())

    await session.start()
    session.stop()
    session.stop()

    assert session.state is SessionState.IDLE
    assert scheduler.jobs == {}


@pytest.mark.asyncio
async def test_stop_lets_running_cycle_finish_and_persist() -> None:
    result_store = _store(make_endpoint("ep-1"))
    session, scheduler, _ = _session(result_store, FakeProbe([healthy(response_time_ms=42)], delay_seconds=0.05))
    await session.start()

    cycle = asyncio.create_task(session.run_check_cycle())
    await asyncio.sleep(0.01)
    session.stop()

    results = await cycle

    assert session.state is SessionState.IDLE
    assert scheduler.jobs == {}
    assert [result.status for result in results] == [CheckStatus.HEALTHY]
    assert [result.endpoint_id for result in result_store.results] == ["ep-1"]
    assert result_store.repository.endpoints["ep-1"].snapshot.status is CheckStatus.HEALTHY
    assert session.snapshot("ep-1").last_response_time_ms == 42


@pytest.mark.asyncio
async def test_wait_for_running_cycles_returns_once_cycle_is_done() -> None:
    result_store = _store(make_endpoint("ep-1"))
    session, _, _ = _session(result_store, FakeProbe(delay_seconds=0.05))
    await session.start()

    assert await session.wait_for_running_cycles(timeout_seconds=0.01) is True

    cycle = asyncio.create_task(session.run_check_cycle())
    await asyncio.sleep(0.01)
    session.stop()

    assert await session.wait_for_running_cycles(timeout_seconds=5) is True
    assert cycle.done()
    assert len(result_store.results) == 1


@pytest.mark.asyncio
async def test_check_cycle_persists_results_and_updates_snapshots() -> None:
    result_store = _store(make_endpoint("ep-1"), make_endpoint("ep-2"))
    session, _, _ = _session(result_store, FakeProbe([healthy(response_time_ms=80)]))
    await session.start()

    results = await session.run_check_cycle()

    assert sorted(result.endpoint_id for result in results) == ["ep-1", "ep-2"]
    assert len(result_store.results) == 2
    assert session.snapshot("ep-1").status is CheckStatus.HEALTHY
    assert session.snapshot("ep-1").last_response_time_ms == 80
    assert session.last_cycle_at == BASE_TIME


@pytest.mark.asyncio
async def test_empty_cycle_still_records_cycle_time() -> None:
    session, _, _ = _session(_store(), FakeProbe())
    await session.start()

    assert await session.run_check_cycle() == []
    assert session.last_cycle_at == BASE_TIME


@pytest.mark.asyncio
async def test_result_for_endpoint_removed_mid_cycle_is_dropped() -> None:
    result_store = _store(make_endpoint("ep-1"), make_endpoint("ep-2"))
    cache_holder: dict[str, DictEndpointCache] = {}

    class RemovingProbe(Probe):
        async def probe(self, endpoint: Endpoint) -> ProbeOutcome:
            if endpoint.id == "ep-2":
                await cache_holder["cache"].remove("ep-2")

            return healthy()

    session, _, cache = _session(result_store, RemovingProbe())
    cache_holder["cache"] = cache
    await session.start()

    results = await session.run_check_cycle()

    assert [result.endpoint_id for result in results] == ["ep-1"]
    assert [result.endpoint_id for result in result_store.results] == ["ep-1"]
    assert session.snapshot("ep-2") is None


@pytest.mark.asyncio
async def test_persistence_failure_does_not_stop_the_cycle() -> None:
    result_store = FailingResultStore(
        FakeEndpointRepository(initial_endpoints=[make_endpoint("ep-1"), make_endpoint("ep-2")])
    )
    session, _, _ = _session(result_store, FakeProbe())
    await session.start()

    results = await session.run_check_cycle()

    assert len(results) == 2
    assert result_store.append_attempts == 2
    assert session.snapshot("ep-1").status is CheckStatus.HEALTHY


@pytest.mark.asyncio
async def test_older_result_does_not_replace_newer_stored_snapshot() -> None:
    newer = BASE_TIME + timedelta(hours=1)
    endpoint = with_snapshot(make_endpoint("ep-1"), CheckStatus.HEALTHY, newer)
    session, _, _ = _session(_store(endpoint), FakeProbe([down()]))
    await session.start()

    await session.run_check_cycle()

    assert session.snapshot("ep-1").status is CheckStatus.HEALTHY
    assert session.snapshot("ep-1").last_checked == newer


@pytest.mark.asyncio
async def test_notifier_sees_transitions_into_and_out_of_down() -> None:
    notifier = FakeFailureNotifier()
    clock = FakeClock()
    probe = FakeProbe([down(), down(), down(), down(), healthy()])
    session, _, _ = _session(
        _store(make_endpoint("ep-1", retry_count=0)),
        probe,
        notifier=notifier,
        clock=clock,
    )
    await session.start()

    await session.run_check_cycle()
    clock.advance(minutes=1)
    await session.run_check_cycle()

    assert [endpoint_id for endpoint_id, _ in notifier.failures] == ["ep-1"]
    assert notifier.recoveries == []

    clock.advance(minutes=1)
    await session.run_check_cycle()
    clock.advance(minutes=1)
    await session.run_check_cycle()
    clock.advance(minutes=1)
    await session.run_check_cycle()

    assert len(notifier.failures) == 1
    assert [endpoint_id for endpoint_id, _ in notifier.recoveries] == ["ep-1"]


@pytest.mark.asyncio
async def test_notifier_is_skipped_when_endpoint_opts_out() -> None:
    notifier = FakeFailureNotifier()
    session, _, _ = _session(
        _store(make_endpoint("ep-1", retry_count=0, notify_on_failure=False)),
        FakeProbe([down()]),
        notifier=notifier,
    )
    await session.start()

    await session.run_check_cycle()

    assert notifier.failures == []


@pytest.mark.asyncio
async def test_refresh_now_picks_up_new_endpoints() -> None:
    result_store = _store(make_endpoint("ep-1"))
    session, _, _ = _session(result_store, FakeProbe())
    await session.start()

    await result_store.repository.save(make_endpoint("ep-2"))
    results = await session.refresh_now()

    assert sorted(result.endpoint_id for result in results) == ["ep-1", "ep-2"]


@pytest.mark.asyncio
async def test_resync_drops_removed_endpoints_and_their_snapshots() -> None:
    result_store = _store(make_endpoint("ep-1"), make_endpoint("ep-2"))
    session, _, cache = _session(result_store, FakeProbe())
    await session.start()
    await session.run_check_cycle()

    await result_store.repository.delete("ep-2")
    await session.resync()

    assert set(await cache.get_all()) == {"ep-1"}
    assert set(session.snapshots()) == {"ep-1"}


@pytest.mark.asyncio
async def test_resync_failure_keeps_current_endpoints() -> None:
    result_store = FailingResultStore(FakeEndpointRepository(initial_endpoints=[make_endpoint("ep-1")]))
    session, _, cache = _session(result_store, FakeProbe())
    await session.start()

    result_store.fail_reads = True
    await session.resync()

    assert set(await cache.get_all()) == {"ep-1"}


@pytest.mark.asyncio
async def test_check_cycle_bounds_concurrency() -> None:
    in_flight = {"current": 0, "peak": 0}

    class SlowProbe(Probe):
        async def probe(self, endpoint: Endpoint) -> ProbeOutcome:
            in_flight["current"] += 1
            in_flight["peak"] = max(in_flight["peak"], in_flight["current"])
            await asyncio.sleep(0.01)
            in_flight["current"] -= 1
            return healthy()

    result_store = _store(*[make_endpoint(f"ep-{index}") for index in range(6)])
    session, _, _ = _session(result_store, SlowProbe(), max_concurrent_checks=2)
    await session.start()

    results = await session.run_check_cycle()

    assert len(results) == 6
    assert in_flight["peak"] == 2
