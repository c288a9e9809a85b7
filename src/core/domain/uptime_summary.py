from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from math import ceil
from typing import Iterable, Optional

from core.domain.check_result import CheckResult
from core.domain.check_status import CheckStatus


def uptime_percentage(healthy_checks: int, total_checks: int) -> float:
    if total_checks == 0:
        return 100.0

    return round((healthy_checks / total_checks) * 100, 2)


def count_incidents(results: Iterable[CheckResult]) -> int:
    incidents = 0
    in_incident = False

    for result in sorted(results, key=lambda item: item.checked_at):
        if result.is_healthy:
            in_incident = False
            continue

        if not in_incident:
            incidents += 1
            in_incident = True

    return incidents


@dataclass
class UptimeDaySummary:
    date: datetime
    total_checks: int
    healthy_checks: int
    uptime: float
    avg_response_time_ms: int
    max_response_time_ms: int
    worst_status: CheckStatus


@dataclass
class UptimeSummary:
    endpoint_id: str
    window_days: int

    total_checks: int = 0
    healthy_checks: int = 0
    degraded_checks: int = 0
    down_checks: int = 0
    uptime: float = 100.0

    avg_response_time_ms: Optional[int] = None
    max_response_time_ms: Optional[int] = None
    incident_count: int = 0

    daily: list[UptimeDaySummary] = field(default_factory=list)

    @classmethod
    def from_results(cls, endpoint_id: str, window_days: int, results: list[CheckResult]) -> "UptimeSummary":
        if not results:
            return cls(endpoint_id=endpoint_id, window_days=window_days)

        statuses = [result.status for result in results]
        healthy_checks = statuses.count(CheckStatus.HEALTHY)
        response_times = [result.response_time_ms for result in results]

        return cls(
            endpoint_id=endpoint_id,
            window_days=window_days,
            total_checks=len(results),
            healthy_checks=healthy_checks,
            degraded_checks=statuses.count(CheckStatus.DEGRADED),
            down_checks=statuses.count(CheckStatus.DOWN),
            uptime=uptime_percentage(healthy_checks, len(results)),
            avg_response_time_ms=ceil(sum(response_times) / len(response_times)),
            max_response_time_ms=max(response_times),
            incident_count=count_incidents(results),
            daily=_summarize_days(results),
        )


def _summarize_days(results: list[CheckResult]) -> list[UptimeDaySummary]:
    grouped: dict[datetime, list[CheckResult]] = {}

    for result in results:
        checked_at = result.checked_at
        if checked_at.tzinfo is not None:
            checked_at = checked_at.astimezone(timezone.utc)

        day = datetime.combine(checked_at.date(), time.min, tzinfo=timezone.utc)
        grouped.setdefault(day, []).append(result)

    summaries = []
    for day, day_results in grouped.items():
        healthy_checks = len([result for result in day_results if result.is_healthy])
        response_times = [result.response_time_ms for result in day_results]

        summaries.append(
            UptimeDaySummary(
                date=day,
                total_checks=len(day_results),
                healthy_checks=healthy_checks,
                uptime=uptime_percentage(healthy_checks, len(day_results)),
                avg_response_time_ms=ceil(sum(response_times) / len(response_times)),
                max_response_time_ms=max(response_times),
                worst_status=max((result.status for result in day_results), key=lambda item: item.severity),
            )
        )

    return sorted(summaries, key=lambda item: item.date, reverse=True)
