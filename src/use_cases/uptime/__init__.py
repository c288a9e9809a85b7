from use_cases.uptime.compute_uptime_use_case import ComputeUptimeUseCase
from use_cases.uptime.get_uptime_summary_use_case import GetUptimeSummaryUseCase

__all__ = [
    "ComputeUptimeUseCase",
    "GetUptimeSummaryUseCase",
]
