"""
Timeline assertions and a per-time-unit reference scheduler used by the tests.
"""

from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from schedsim.models import Process, ScheduledSlice
from schedsim.timeline import TimelineBuilder


def coalesce(slices: Iterable[ScheduledSlice]) -> List[ScheduledSlice]:
    """Merge an ordered raw record (e.g. one entry per time unit)."""
    builder = TimelineBuilder()
    for sl in slices:
        builder.append(sl.pid, sl.start_time, sl.end_time)
    return builder.build()


def busy_time_by_pid(slices: Iterable[ScheduledSlice]) -> Dict[int, int]:
    totals: Dict[int, int] = {}
    for sl in slices:
        totals[sl.pid] = totals.get(sl.pid, 0) + sl.duration
    return totals


def timeline_problems(slices: List[ScheduledSlice]) -> List[str]:
    problems: List[str] = []
    for idx, sl in enumerate(slices):
        if sl.end_time <= sl.start_time:
            problems.append(f"entry {idx} (pid {sl.pid}) is empty or reversed")
        if idx == 0:
            continue
        prev = slices[idx - 1]
        if sl.start_time < prev.end_time:
            problems.append(f"entry {idx} (pid {sl.pid}) overlaps entry {idx - 1}")
        if sl.pid == prev.pid:
            problems.append(f"entries {idx - 1} and {idx} share pid {sl.pid}")
    return problems


UnitKey = Callable[[Process, int], tuple]


def shortest_remaining(p: Process, remaining: int) -> tuple:
    return (remaining, p.arrival_time, p.pid)


def highest_priority(p: Process, remaining: int) -> tuple:
    return (p.priority, p.arrival_time, p.pid)


def per_unit_schedule(
    processes: Sequence[Process], key: UnitKey
) -> Tuple[List[ScheduledSlice], Dict[int, int], Dict[int, int]]:
    """
    Re-pick the running process at every time unit.

    Returns the coalesced timeline plus first-dispatch and completion times
    keyed by pid.
    """
    remaining = {p.pid: p.burst_time for p in processes}
    first_dispatch: Dict[int, int] = {}
    completion: Dict[int, int] = {}
    record: List[ScheduledSlice] = []
    t = 0

    while len(completion) < len(processes):
        ready = [p for p in processes if p.arrival_time <= t and remaining[p.pid] > 0]
        if not ready:
            t = min(p.arrival_time for p in processes if remaining[p.pid] > 0)
            continue

        chosen = min(ready, key=lambda p: key(p, remaining[p.pid]))
        first_dispatch.setdefault(chosen.pid, t)
        record.append(ScheduledSlice(chosen.pid, t, t + 1))
        remaining[chosen.pid] -= 1
        t += 1
        if remaining[chosen.pid] == 0:
            completion[chosen.pid] = t

    return coalesce(record), first_dispatch, completion
