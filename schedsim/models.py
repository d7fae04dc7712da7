from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.pid,
            "burstTime": self.burst_time,
            "arrivalTime": self.arrival_time,
            "priority": self.priority,
        }


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processId": self.pid,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.pid,
            "arrivalTime": self.arrival_time,
            "burstTime": self.burst_time,
            "priority": self.priority,
            "startTime": self.start_time,
            "completionTime": self.completion_time,
            "turnaroundTime": self.turnaround_time,
            "waitingTime": self.waiting_time,
            "responseTime": self.response_time,
        }


@dataclass
class SystemMetrics:
    avg_turnaround_time: float
    avg_waiting_time: float
    avg_response_time: float
    avg_completion_time: float
    throughput: float
    cpu_utilization: float
    cpu_busy_time: int
    idle_time: int
    makespan: int


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Encode the result in the camelCase shape served over HTTP.
        """
        data: Dict[str, Any] = {
            "name": self.algorithm,
            "ganttChart": [s.to_dict() for s in self.timeline],
            "processes": [p.to_dict() for p in self.processes],
        }
        if self.quantum is not None:
            data["timeQuantum"] = self.quantum
        if self.system is not None:
            data.update(
                {
                    "avgTurnaroundTime": self.system.avg_turnaround_time,
                    "avgWaitingTime": self.system.avg_waiting_time,
                    "avgResponseTime": self.system.avg_response_time,
                    "avgCompletionTime": self.system.avg_completion_time,
                    "throughput": self.system.throughput,
                    "cpuUtilization": self.system.cpu_utilization,
                }
            )
        return data
