from __future__ import annotations

import random
from typing import List, Optional, Tuple

from .models import Process

DEFAULT_BURST_RANGE = (1, 100)


def default_arrival_range(count: int) -> Tuple[int, int]:
    return (0, max(10, count * 2))


def default_priority_range(count: int) -> Tuple[int, int]:
    return (1, max(1, count * 2))


def _check_range(name: str, bounds: Tuple[int, int], minimum: Optional[int] = None) -> None:
    low, high = bounds
    if minimum is not None and low < minimum:
        raise ValueError(f"{name} lower bound must be >= {minimum}, got {low}")
    if high < low:
        raise ValueError(f"{name} range is inverted: {bounds}")


def generate_processes(
    count: int,
    *,
    burst_range: Tuple[int, int] = DEFAULT_BURST_RANGE,
    arrival_range: Optional[Tuple[int, int]] = None,
    priority_range: Optional[Tuple[int, int]] = None,
    seed: Optional[int] = None,
) -> List[Process]:
    """
    Build `count` random processes with ids 1..count.

    Burst, arrival and priority are sampled uniformly within the inclusive
    bounds given. Uses its own Random instance, so passing a seed makes the
    workload reproducible without touching the global random state.
    """
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")

    arrival_range = arrival_range or default_arrival_range(count)
    priority_range = priority_range or default_priority_range(count)

    _check_range("burst", burst_range, 1)
    _check_range("arrival", arrival_range, 0)
    _check_range("priority", priority_range)

    rng = random.Random(seed)
    return [
        Process(
            pid=pid,
            arrival_time=rng.randint(*arrival_range),
            burst_time=rng.randint(*burst_range),
            priority=rng.randint(*priority_range),
        )
        for pid in range(1, count + 1)
    ]
