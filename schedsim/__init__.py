"""
CPU scheduling simulator.

Computes execution timelines and per-process metrics for FCFS, SJF, SRTF,
non-preemptive Priority and Round Robin scheduling.
"""

from .algorithms import ALGORITHMS, simulate
from .errors import InvalidConfiguration, InvalidInput, SchedulerError
from .metrics import compute_aggregate_metrics
from .models import IDLE, AggregateMetrics, ExecutionBlock, Process, ProcessResult, SimulationResult

__all__ = [
    "ALGORITHMS",
    "IDLE",
    "AggregateMetrics",
    "ExecutionBlock",
    "InvalidConfiguration",
    "InvalidInput",
    "Process",
    "ProcessResult",
    "SchedulerError",
    "SimulationResult",
    "compute_aggregate_metrics",
    "simulate",
]
