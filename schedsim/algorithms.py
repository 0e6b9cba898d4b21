from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, List, Optional

from .errors import InvalidConfiguration
from .models import IDLE, ExecutionBlock, Process, ProcessResult, SimulationResult
from .validation import validate_processes, validate_quantum

logger = logging.getLogger(__name__)


@dataclass
class _Dispatched:
    """Provisional record for a process that has been dispatched but not finished."""

    process: Process
    start: int

    def complete(self, completion: int) -> ProcessResult:
        p = self.process
        turnaround = completion - p.arrival
        return ProcessResult(
            pid=p.pid,
            arrival=p.arrival,
            burst=p.burst,
            priority=p.priority,
            start=self.start,
            completion=completion,
            turnaround=turnaround,
            waiting=turnaround - p.burst,
            response=self.start - p.arrival,
        )


class _Timeline:
    def __init__(self) -> None:
        self.blocks: List[ExecutionBlock] = []

    def add(self, pid: str, start: int, end: int, coalesce: bool = False) -> None:
        if end <= start:
            return
        if coalesce and self.blocks:
            last = self.blocks[-1]
            if last.pid == pid and last.end == start:
                self.blocks[-1] = ExecutionBlock(pid=pid, start=last.start, end=end)
                return
        self.blocks.append(ExecutionBlock(pid=pid, start=start, end=end))

    def idle(self, start: int, end: int) -> None:
        logger.debug("t=%d: CPU idle until %d", start, end)
        self.add(IDLE, start, end, coalesce=True)


def _build_result(
    algorithm: str,
    policy: str,
    quantum: Optional[int],
    procs: List[Process],
    timeline: _Timeline,
    finished: Dict[str, ProcessResult],
    end_time: int,
) -> SimulationResult:
    origin = procs[0].arrival
    result = SimulationResult(
        algorithm=algorithm,
        policy=policy,
        quantum=quantum,
        blocks=tuple(timeline.blocks),
        results={p.pid: finished[p.pid] for p in procs},
        origin=origin,
        end_time=end_time,
    )
    logger.info(
        "%s: %d processes in %d blocks, t=%d..%d",
        algorithm,
        len(procs),
        len(result.blocks),
        origin,
        end_time,
    )
    return result


def schedule_fcfs(processes: Iterable[Process], quantum: Optional[int] = None) -> SimulationResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    procs = validate_processes(processes)

    time = procs[0].arrival
    timeline = _Timeline()
    finished: Dict[str, ProcessResult] = {}

    for p in procs:
        if time < p.arrival:
            timeline.idle(time, p.arrival)
            time = p.arrival

        logger.debug("t=%d: dispatch %s for %d", time, p.pid, p.burst)
        timeline.add(p.pid, time, time + p.burst)
        finished[p.pid] = _Dispatched(p, time).complete(time + p.burst)
        time += p.burst

    return _build_result("FCFS", "fcfs", None, procs, timeline, finished, time)


def _schedule_non_preemptive(
    procs: List[Process],
    key: Callable[[Process], tuple],
    algorithm: str,
    policy: str,
) -> SimulationResult:
    """
    Shared loop for SJF and static Priority.

    At each decision point pick the ready process with the smallest ``key``
    and run it to completion; jump idle to the next arrival if none is ready.
    """
    pending: List[Process] = list(procs)

    time = procs[0].arrival
    timeline = _Timeline()
    finished: Dict[str, ProcessResult] = {}

    while pending:
        ready = [p for p in pending if p.arrival <= time]

        if not ready:
            # pending stays sorted by arrival
            next_arrival = pending[0].arrival
            timeline.idle(time, next_arrival)
            time = next_arrival
            continue

        p = min(ready, key=key)
        pending.remove(p)

        logger.debug("t=%d: dispatch %s for %d", time, p.pid, p.burst)
        timeline.add(p.pid, time, time + p.burst)
        finished[p.pid] = _Dispatched(p, time).complete(time + p.burst)
        time += p.burst

    return _build_result(algorithm, policy, None, procs, timeline, finished, time)


def schedule_sjf(processes: Iterable[Process], quantum: Optional[int] = None) -> SimulationResult:
    """
    Shortest Job First (non-preemptive).

    Among arrived processes, choose the smallest burst; ties go to the
    earlier arrival, then the lower PID.
    """
    procs = validate_processes(processes)
    return _schedule_non_preemptive(
        procs,
        key=lambda p: (p.burst, p.arrival, p.pid),
        algorithm="SJF (non-preemptive)",
        policy="sjf",
    )


def schedule_priority(processes: Iterable[Process], quantum: Optional[int] = None) -> SimulationResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. A running process is
    never preempted by a later, more urgent arrival.
    """
    procs = validate_processes(processes)
    return _schedule_non_preemptive(
        procs,
        key=lambda p: (p.priority, p.arrival, p.pid),
        algorithm="Priority (non-preemptive)",
        policy="priority",
    )


def schedule_srtf(processes: Iterable[Process], quantum: Optional[int] = None) -> SimulationResult:
    """
    Shortest Remaining Time First (preemptive SJF).

    The choice only changes when a process arrives or finishes, so instead of
    stepping one time unit at a time the running process is advanced straight
    to the next of those events. Adjacent slices of the same process are
    merged, giving the same blocks a unit-step simulation would.
    """
    procs = validate_processes(processes)

    remaining = {p.pid: p.burst for p in procs}
    dispatched: Dict[str, _Dispatched] = {}
    finished: Dict[str, ProcessResult] = {}

    time = procs[0].arrival
    timeline = _Timeline()

    def next_arrival_after(t: int) -> Optional[int]:
        future = [p.arrival for p in procs if p.arrival > t]
        return min(future) if future else None

    while len(finished) < len(procs):
        ready = [p for p in procs if p.arrival <= time and remaining[p.pid] > 0]
        if not ready:
            nxt = next_arrival_after(time)
            timeline.idle(time, nxt)
            time = nxt
            continue

        current = min(ready, key=lambda p: (remaining[p.pid], p.arrival, p.pid))

        if current.pid not in dispatched:
            dispatched[current.pid] = _Dispatched(current, time)

        nxt = next_arrival_after(time)
        if nxt is None:
            run_time = remaining[current.pid]
        else:
            run_time = min(remaining[current.pid], nxt - time)

        logger.debug("t=%d: run %s for %d (remaining %d)", time, current.pid, run_time, remaining[current.pid])
        timeline.add(current.pid, time, time + run_time, coalesce=True)

        time += run_time
        remaining[current.pid] -= run_time

        if remaining[current.pid] == 0:
            finished[current.pid] = dispatched.pop(current.pid).complete(time)

    return _build_result("SRTF", "srtf", None, procs, timeline, finished, time)


def schedule_rr(processes: Iterable[Process], quantum: Optional[int] = None) -> SimulationResult:
    """
    Round Robin scheduling with a fixed time quantum.

    After each slice, processes that arrived during it are queued before the
    process that was just preempted.
    """
    quantum = validate_quantum(quantum)
    procs = validate_processes(processes)

    remaining = {p.pid: p.burst for p in procs}
    dispatched: Dict[str, _Dispatched] = {}
    finished: Dict[str, ProcessResult] = {}

    time = procs[0].arrival
    timeline = _Timeline()
    ready: Deque[Process] = deque()
    next_idx = 0

    def enqueue_new_arrivals(current_time: int) -> None:
        nonlocal next_idx
        while next_idx < len(procs) and procs[next_idx].arrival <= current_time:
            ready.append(procs[next_idx])
            next_idx += 1

    enqueue_new_arrivals(time)

    while len(finished) < len(procs):
        if not ready:
            next_arrival = procs[next_idx].arrival
            timeline.idle(time, next_arrival)
            time = next_arrival
            enqueue_new_arrivals(time)
            continue

        p = ready.popleft()
        if p.pid not in dispatched:
            dispatched[p.pid] = _Dispatched(p, time)

        run_time = min(quantum, remaining[p.pid])
        logger.debug("t=%d: run %s for %d (remaining %d)", time, p.pid, run_time, remaining[p.pid])
        timeline.add(p.pid, time, time + run_time)

        time += run_time
        remaining[p.pid] -= run_time

        enqueue_new_arrivals(time)

        if remaining[p.pid] > 0:
            ready.append(p)
        else:
            finished[p.pid] = dispatched.pop(p.pid).complete(time)

    return _build_result("Round Robin", "rr", quantum, procs, timeline, finished, time)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "srtf": schedule_srtf,
    "priority": schedule_priority,
    "rr": schedule_rr,
}

ALIASES = {
    "pr": "priority",
    "round-robin": "rr",
    "round_robin": "rr",
}


def resolve_policy(name: str) -> str:
    if not isinstance(name, str):
        raise InvalidConfiguration(f"Policy name must be a string, got {name!r}")
    key = name.strip().lower()
    key = ALIASES.get(key, key)
    if key not in ALGORITHMS:
        raise InvalidConfiguration(
            f"Unknown algorithm '{name}' (choose from: {', '.join(ALGORITHMS)})"
        )
    return key


def simulate(policy: str, processes: Iterable[Process], quantum: Optional[int] = None) -> SimulationResult:
    """
    Dispatch to the requested algorithm. ``quantum`` is only used by Round Robin.
    """
    func = ALGORITHMS[resolve_policy(policy)]
    return func(processes, quantum=quantum)
