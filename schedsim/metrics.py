from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .errors import EmptyInputError
from .models import ScheduleResult, SystemMetrics


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute averages, throughput and CPU utilization given populated
    per-process metrics and timeline slices.

    The makespan is the end of the last timeline slice. An empty process list
    or an empty timeline is rejected instead of producing a zero or infinite
    ratio.
    """
    if not result.processes:
        raise EmptyInputError("cannot aggregate metrics over zero processes")
    if not result.timeline:
        raise EmptyInputError("cannot aggregate metrics over an empty timeline")

    makespan = result.timeline[-1].end_time
    if makespan <= 0:
        raise EmptyInputError("makespan is zero")

    cpu_busy_time = sum(slice_.end_time - slice_.start_time for slice_ in result.timeline)
    idle_time = makespan - cpu_busy_time

    n = len(result.processes)
    system = SystemMetrics(
        avg_turnaround_time=sum(p.turnaround_time for p in result.processes) / n,
        avg_waiting_time=sum(p.waiting_time for p in result.processes) / n,
        avg_response_time=sum(p.response_time for p in result.processes) / n,
        avg_completion_time=sum(p.completion_time for p in result.processes) / n,
        throughput=n / makespan,
        cpu_utilization=100.0 * (makespan - idle_time) / makespan,
        cpu_busy_time=cpu_busy_time,
        idle_time=idle_time,
        makespan=makespan,
    )
    result.system = system
    return system



def summarize(results: Iterable[ScheduleResult]) -> List[Dict[str, Any]]:
    """
    One comparison row per result, in the order given.

    Each row carries the algorithm name, its system metrics and a
    ``wait_rank`` (1 = lowest average waiting time; equal averages share a
    rank). Results whose system metrics have not been computed yet are
    aggregated on the way.
    """
    rows: List[Dict[str, Any]] = []
    for result in results:
        system = result.system or compute_system_metrics(result)
        rows.append(
            {
                "algorithm": result.algorithm,
                "quantum": result.quantum,
                "avg_waiting_time": system.avg_waiting_time,
                "avg_turnaround_time": system.avg_turnaround_time,
                "avg_response_time": system.avg_response_time,
                "avg_completion_time": system.avg_completion_time,
                "throughput": system.throughput,
                "cpu_utilization": system.cpu_utilization,
                "makespan": system.makespan,
            }
        )

    for row in rows:
        row["wait_rank"] = 1 + sum(other["avg_waiting_time"] < row["avg_waiting_time"] for other in rows)
    return rows
