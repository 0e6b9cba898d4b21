from __future__ import annotations

from typing import List

from .models import AggregateMetrics, ProcessResult, SimulationResult


def compute_aggregate_metrics(result: SimulationResult) -> AggregateMetrics:
    """
    Compute averages, throughput and CPU utilization for a finished run.

    Throughput and utilization are measured over ``[origin, end_time)``; when
    that window is empty the throughput is the process count.
    """
    summary = summarize_process_metrics(result.processes)
    count = len(result.results)

    makespan = result.end_time - result.origin
    cpu_busy_time = sum(b.duration for b in result.blocks if not b.is_idle)

    throughput = count / makespan if makespan > 0 else float(count)
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 1.0

    return AggregateMetrics(
        count=count,
        avg_completion=summary["avg_completion"],
        avg_turnaround=summary["avg_turnaround"],
        avg_waiting=summary["avg_waiting"],
        avg_response=summary["avg_response"],
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )


def summarize_process_metrics(processes: List[ProcessResult]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_completion": 0.0, "avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_completion": sum(p.completion for p in processes) / n,
        "avg_waiting": sum(p.waiting for p in processes) / n,
        "avg_turnaround": sum(p.turnaround for p in processes) / n,
        "avg_response": sum(p.response for p in processes) / n,
    }
