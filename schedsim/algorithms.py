from __future__ import annotations

import heapq
import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence, Tuple

from .errors import InvalidQuantumError, UnknownAlgorithmError
from .metrics import compute_system_metrics
from .models import Process, ProcessMetrics, ScheduleResult
from .timeline import TimelineBuilder

logger = logging.getLogger(__name__)

SelectionKey = Callable[[int], Tuple[int, int, int]]


class _RunState:
    """
    Private per-run bookkeeping.

    The input processes are frozen into a tuple; everything that changes while
    simulating (remaining burst, first dispatch, completion) lives in lists
    indexed by position in that tuple. Algorithms pass indices around, never
    Process objects.
    """

    def __init__(self, processes: Sequence[Process]) -> None:
        self.processes: Tuple[Process, ...] = tuple(processes)
        n = len(self.processes)
        self.remaining: List[int] = [p.burst_time for p in self.processes]
        self.first_dispatch: List[Optional[int]] = [None] * n
        self.completion: List[Optional[int]] = [None] * n
        self.timeline = TimelineBuilder()
        # Ties on arrival break by pid.
        self.arrival_order: List[int] = sorted(
            range(n), key=lambda i: (self.processes[i].arrival_time, self.processes[i].pid)
        )

    def arrival(self, idx: int) -> int:
        return self.processes[idx].arrival_time

    def dispatch(self, idx: int, start_time: int, run_time: int) -> int:
        """Run process `idx` for `run_time` units from `start_time`; return the end time."""
        if self.first_dispatch[idx] is None:
            self.first_dispatch[idx] = start_time

        end_time = start_time + run_time
        self.timeline.append(self.processes[idx].pid, start_time, end_time)
        self.remaining[idx] -= run_time
        if self.remaining[idx] == 0:
            self.completion[idx] = end_time
        return end_time

    def finish(self, algorithm: str, quantum: Optional[int] = None) -> ScheduleResult:
        metrics: List[ProcessMetrics] = []
        for idx, p in enumerate(self.processes):
            start_time = self.first_dispatch[idx]
            completion_time = self.completion[idx]
            turnaround_time = completion_time - p.arrival_time
            metrics.append(
                ProcessMetrics(
                    pid=p.pid,
                    arrival_time=p.arrival_time,
                    burst_time=p.burst_time,
                    start_time=start_time,
                    completion_time=completion_time,
                    waiting_time=turnaround_time - p.burst_time,
                    turnaround_time=turnaround_time,
                    response_time=start_time - p.arrival_time,
                    priority=p.priority,
                )
            )

        result = ScheduleResult(
            algorithm=algorithm,
            quantum=quantum,
            processes=metrics,
            timeline=self.timeline.build(),
        )
        compute_system_metrics(result)
        return result


def _run_non_preemptive(state: _RunState, key: SelectionKey) -> None:
    """
    Repeatedly pick the best arrived process by `key` and run it to completion.
    """
    arrivals: Deque[int] = deque(state.arrival_order)
    ready: List[Tuple[Tuple[int, int, int], int]] = []
    time = 0

    while arrivals or ready:
        while arrivals and state.arrival(arrivals[0]) <= time:
            idx = arrivals.popleft()
            heapq.heappush(ready, (key(idx), idx))

        if not ready:
            # Nothing has arrived yet: jump to the next arrival.
            time = state.arrival(arrivals[0])
            continue

        _, idx = heapq.heappop(ready)
        time = state.dispatch(idx, time, state.remaining[idx])


def _run_preemptive(state: _RunState, key: SelectionKey) -> None:
    """
    Event-driven preemptive loop.

    The selection is only re-evaluated at arrival and completion instants.
    Between two such instants the running process stays the best candidate
    (its key can only improve while it runs), so this yields the same
    schedule as re-evaluating at every time unit.
    """
    arrivals: Deque[int] = deque(state.arrival_order)
    ready: List[Tuple[Tuple[int, int, int], int]] = []
    time = 0

    while arrivals or ready:
        while arrivals and state.arrival(arrivals[0]) <= time:
            idx = arrivals.popleft()
            heapq.heappush(ready, (key(idx), idx))

        if not ready:
            time = state.arrival(arrivals[0])
            continue

        _, idx = heapq.heappop(ready)

        # Run until completion or next arrival, whichever comes first.
        run_time = state.remaining[idx]
        if arrivals:
            run_time = min(run_time, state.arrival(arrivals[0]) - time)

        time = state.dispatch(idx, time, run_time)

        if state.remaining[idx] > 0:
            heapq.heappush(ready, (key(idx), idx))


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run in (arrival_time, pid) order; burst and priority never
    influence the order.
    """
    state = _RunState(processes)

    time = 0
    for idx in state.arrival_order:
        if time < state.arrival(idx):
            time = state.arrival(idx)
        time = state.dispatch(idx, time, state.remaining[idx])

    return state.finish("FCFS")


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time (tie-breaker:
    earlier arrival, then PID).
    """
    state = _RunState(processes)
    procs = state.processes
    _run_non_preemptive(state, lambda i: (procs[i].burst_time, procs[i].arrival_time, procs[i].pid))
    return state.finish("SJF")


def schedule_srtn(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Remaining Time Next (preemptive SJF).
    """
    state = _RunState(processes)
    procs = state.processes
    remaining = state.remaining
    _run_preemptive(state, lambda i: (remaining[i], procs[i].arrival_time, procs[i].pid))
    return state.finish("SRTN")


def schedule_rr(
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    arrivals_first: bool = True,
) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    After each slice, processes that arrived during it join the tail of the
    queue before the preempted process is re-queued. Pass
    ``arrivals_first=False`` to re-queue the preempted process first.
    """
    if quantum is None or quantum <= 0:
        raise InvalidQuantumError(f"Round Robin requires a positive quantum, got {quantum!r}")

    state = _RunState(processes)
    arrivals: Deque[int] = deque(state.arrival_order)
    ready: Deque[int] = deque()

    def enqueue_new_arrivals(current_time: int) -> None:
        while arrivals and state.arrival(arrivals[0]) <= current_time:
            ready.append(arrivals.popleft())

    time = 0
    while arrivals or ready:
        enqueue_new_arrivals(time)

        if not ready:
            # Jump to next arrival if CPU is idle
            time = state.arrival(arrivals[0])
            continue

        idx = ready.popleft()
        run_time = min(quantum, state.remaining[idx])
        time = state.dispatch(idx, time, run_time)

        if arrivals_first:
            enqueue_new_arrivals(time)

        if state.remaining[idx] > 0:
            ready.append(idx)

    return state.finish(f"Round Robin (TQ={quantum})", quantum=quantum)


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Among ready
    processes, choose the one with the smallest priority; break ties
    by earlier arrival time, then PID.
    """
    state = _RunState(processes)
    procs = state.processes
    _run_non_preemptive(state, lambda i: (procs[i].priority, procs[i].arrival_time, procs[i].pid))
    return state.finish("Priority (Non-Preemptive)")


def schedule_priority_preemptive(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Preemptive Priority scheduling: a newly arrived process with a smaller
    priority value takes the CPU immediately.
    """
    state = _RunState(processes)
    procs = state.processes
    _run_preemptive(state, lambda i: (procs[i].priority, procs[i].arrival_time, procs[i].pid))
    return state.finish("Priority (Preemptive)")


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "srtn": schedule_srtn,
    "rr": schedule_rr,
    "priority": schedule_priority,
    "priority_preemptive": schedule_priority_preemptive,
}

ALIASES: Dict[str, str] = {
    "srtf": "srtn",
    "round_robin": "rr",
    "roundrobin": "rr",
    "priority_np": "priority",
    "prioritypreemptive": "priority_preemptive",
    "priority_p": "priority_preemptive",
}


def resolve_algorithm(name: str) -> str:
    """
    Map a user-supplied algorithm name (or alias) to its registry key.
    """
    key = name.strip().lower().replace("-", "_")
    key = ALIASES.get(key, key)
    if key not in ALGORITHMS:
        raise UnknownAlgorithmError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")
    return key


def run_algorithm(
    name: str,
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    arrivals_first: bool = True,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    key = resolve_algorithm(name)
    logger.debug("running %s on %d processes (quantum=%s)", key, len(processes), quantum)

    if key == "rr":
        return schedule_rr(processes, quantum=quantum, arrivals_first=arrivals_first)
    return ALGORITHMS[key](processes, quantum=quantum)
