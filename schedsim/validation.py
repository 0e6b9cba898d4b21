from __future__ import annotations

import math
from numbers import Real
from typing import Iterable, List

from .errors import InvalidConfiguration, InvalidInput
from .models import IDLE, Process


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_processes(processes: Iterable[Process]) -> List[Process]:
    """
    Check a process set and return it sorted by (arrival, pid).

    Raises InvalidInput on the first offending process.
    """
    procs = list(processes)
    if not procs:
        raise InvalidInput("At least one process is required")

    seen: set[str] = set()
    for p in procs:
        if not isinstance(p, Process):
            raise InvalidInput(f"Expected a Process, got {p!r}")
        if not isinstance(p.pid, str) or not p.pid.strip():
            raise InvalidInput(f"PID missing for process {p!r}")
        if p.pid == IDLE:
            raise InvalidInput(f"PID '{IDLE}' is reserved for idle time")
        if p.pid in seen:
            raise InvalidInput(f"Duplicate PID: {p.pid}")
        if not _is_int(p.arrival) or p.arrival < 0:
            raise InvalidInput(f"Invalid arrival for {p.pid}: {p.arrival!r} (need integer >= 0)")
        if not _is_int(p.burst) or p.burst <= 0:
            raise InvalidInput(f"Invalid burst for {p.pid}: {p.burst!r} (need integer > 0)")
        if isinstance(p.priority, bool) or not isinstance(p.priority, Real) or not math.isfinite(p.priority):
            raise InvalidInput(f"Invalid priority for {p.pid}: {p.priority!r}")
        seen.add(p.pid)

    return sorted(procs, key=lambda p: (p.arrival, p.pid))


def validate_quantum(quantum) -> int:
    if quantum is None:
        raise InvalidConfiguration("Round Robin requires a quantum (use --quantum)")
    if not _is_int(quantum):
        raise InvalidConfiguration(f"Quantum must be a whole number of time units, got {quantum!r}")
    if quantum <= 0:
        raise InvalidConfiguration(f"Quantum must be positive, got {quantum}")
    return quantum
