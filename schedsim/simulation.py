from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, fields
from typing import List, Mapping, Optional, Sequence, Union

from .algorithms import resolve_algorithm, run_algorithm
from .errors import (
    EmptyInputError,
    InvalidProcessError,
    InvalidQuantumError,
    NoAlgorithmSelectedError,
)
from .models import Process, ScheduleResult

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2


@dataclass
class AlgorithmSelection:
    """
    Boolean flags choosing which algorithms to run. Selected algorithms run
    in field order.
    """

    fcfs: bool = False
    sjf: bool = False
    srtn: bool = False
    round_robin: bool = False
    priority: bool = False
    priority_preemptive: bool = False

    # Flag names used by the HTTP payload.
    WIRE_NAMES = {
        "fcfs": "fcfs",
        "sjf": "sjf",
        "srtn": "srtn",
        "roundRobin": "round_robin",
        "priority": "priority",
        "priorityPreemptive": "priority_preemptive",
    }

    @classmethod
    def from_flags(cls, flags: Mapping[str, object]) -> "AlgorithmSelection":
        """
        Build a selection from a mapping of flag name to boolean.
        Accepts both the camelCase wire names and the field names; unknown
        names are ignored. A value that is not a real boolean (``"false"``,
        ``1``) raises TypeError instead of being read for its truthiness.
        """
        field_names = {f.name for f in fields(cls)}
        kwargs = {}
        for raw_name, value in flags.items():
            name = cls.WIRE_NAMES.get(raw_name, raw_name)
            if name not in field_names:
                continue
            if not isinstance(value, bool):
                raise TypeError(f"algorithm flag {raw_name!r} must be true or false, got {value!r}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def all(cls) -> "AlgorithmSelection":
        return cls(**{f.name: True for f in fields(cls)})

    def names(self) -> List[str]:
        """Return the selected algorithm names, in field order."""
        return [resolve_algorithm(f.name) for f in fields(self) if getattr(self, f.name)]


AlgorithmRequest = Union[AlgorithmSelection, Sequence[str]]


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_processes(processes: Sequence[Process]) -> None:
    if not processes:
        raise EmptyInputError("process list is empty")

    seen = set()
    for p in processes:
        if not _is_int(p.pid):
            raise InvalidProcessError(f"process id must be an integer, got {p.pid!r}")
        if p.pid in seen:
            raise InvalidProcessError(f"duplicate process id {p.pid}")
        seen.add(p.pid)

        if not _is_int(p.burst_time) or p.burst_time <= 0:
            raise InvalidProcessError(f"process {p.pid}: burst time must be a positive integer, got {p.burst_time!r}")
        if not _is_int(p.arrival_time) or p.arrival_time < 0:
            raise InvalidProcessError(
                f"process {p.pid}: arrival time must be a non-negative integer, got {p.arrival_time!r}"
            )
        if not _is_int(p.priority):
            raise InvalidProcessError(f"process {p.pid}: priority must be an integer, got {p.priority!r}")


def _algorithm_names(algorithms: AlgorithmRequest) -> List[str]:
    if isinstance(algorithms, AlgorithmSelection):
        names = algorithms.names()
    elif isinstance(algorithms, str):
        names = [resolve_algorithm(algorithms)]
    else:
        names = [resolve_algorithm(name) for name in algorithms]

    if not names:
        raise NoAlgorithmSelectedError("no scheduling algorithm selected")
    return names


def validate(
    processes: Sequence[Process],
    algorithms: AlgorithmRequest,
    quantum: Optional[int] = None,
) -> List[str]:
    """
    Check a whole request before anything runs.

    Returns the resolved algorithm names in request order.
    """
    validate_processes(processes)
    names = _algorithm_names(algorithms)
    if "rr" in names and quantum is not None and (not _is_int(quantum) or quantum <= 0):
        raise InvalidQuantumError(f"time quantum must be a positive integer, got {quantum!r}")
    return names


def simulate(
    processes: Sequence[Process],
    algorithms: AlgorithmRequest,
    quantum: Optional[int] = None,
    *,
    max_workers: Optional[int] = None,
    rr_arrivals_first: bool = True,
) -> List[ScheduleResult]:
    """
    Validate the request, then run every requested algorithm on its own copy
    of the input and return one result per algorithm in request order.

    Nothing runs unless the whole request is valid. With ``max_workers``
    greater than one the algorithms run on a thread pool; results are the
    same as a sequential run.
    """
    names = validate(processes, algorithms, quantum)
    if "rr" in names and quantum is None:
        quantum = DEFAULT_QUANTUM

    snapshot = tuple(processes)
    logger.info("simulating %d processes with %s", len(snapshot), ", ".join(names))

    def run(name: str) -> ScheduleResult:
        result = run_algorithm(
            name,
            list(snapshot),
            quantum=quantum if name == "rr" else None,
            arrivals_first=rr_arrivals_first,
        )
        logger.debug(
            "%s: makespan=%d avg_wait=%.2f",
            result.algorithm,
            result.system.makespan,
            result.system.avg_waiting_time,
        )
        return result

    if max_workers is not None and max_workers > 1 and len(names) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(run, names))

    return [run(name) for name in names]
