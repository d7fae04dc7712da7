"""
CPU scheduling simulator.

Runs FCFS, SJF, SRTN, Round Robin and both Priority disciplines over a set of
processes and reports each schedule's timeline and performance metrics.
"""

from .errors import (
    EmptyInputError,
    InvalidProcessError,
    InvalidQuantumError,
    NoAlgorithmSelectedError,
    SimulationError,
    UnknownAlgorithmError,
)
from .models import Process, ProcessMetrics, ScheduledSlice, ScheduleResult, SystemMetrics
from .simulation import DEFAULT_QUANTUM, AlgorithmSelection, simulate, validate

__all__ = [
    "AlgorithmSelection",
    "DEFAULT_QUANTUM",
    "EmptyInputError",
    "InvalidProcessError",
    "InvalidQuantumError",
    "NoAlgorithmSelectedError",
    "Process",
    "ProcessMetrics",
    "ScheduleResult",
    "ScheduledSlice",
    "SimulationError",
    "SystemMetrics",
    "UnknownAlgorithmError",
    "simulate",
    "validate",
]
