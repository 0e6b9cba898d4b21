from __future__ import annotations

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple, Union

IDLE = "IDLE"

Number = Union[int, float]


@dataclass(frozen=True)
class Process:
    pid: str
    arrival: int
    burst: int
    priority: Number = 0


@dataclass(frozen=True)
class ExecutionBlock:
    """
    One contiguous slice of CPU time, owned by a process or by ``IDLE``.
    """

    pid: str
    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def is_idle(self) -> bool:
        return self.pid == IDLE


@dataclass(frozen=True)
class ProcessResult:
    pid: str
    arrival: int
    burst: int
    priority: Number
    start: int
    completion: int
    turnaround: int
    waiting: int
    response: int


@dataclass(frozen=True)
class AggregateMetrics:
    count: int
    avg_completion: float
    avg_turnaround: float
    avg_waiting: float
    avg_response: float
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass(frozen=True)
class SimulationResult:
    """
    Outcome of one simulation run.

    ``blocks`` is sorted by start time and tiles ``[origin, end_time)``
    without gaps; ``results`` holds exactly one entry per input process,
    ordered by (arrival, pid).
    """

    algorithm: str
    policy: str
    quantum: Optional[int]
    blocks: Tuple[ExecutionBlock, ...]
    results: Mapping[str, ProcessResult]
    origin: int
    end_time: int
    _pids: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    # the results mapping is a read-only view, not a hashable value
    __hash__ = None

    def __post_init__(self) -> None:
        # Freeze the containers handed in by the algorithms.
        object.__setattr__(self, "blocks", tuple(self.blocks))
        object.__setattr__(self, "results", MappingProxyType(dict(self.results)))
        object.__setattr__(self, "_pids", tuple(self.results))

    @property
    def processes(self) -> List[ProcessResult]:
        return [self.results[pid] for pid in self._pids]

    def blocks_for(self, pid: str) -> List[ExecutionBlock]:
        return [b for b in self.blocks if b.pid == pid]

    def to_dict(self) -> dict:
        """Plain-data view of the result, suitable for ``json.dumps``."""
        return {
            "algorithm": self.algorithm,
            "policy": self.policy,
            "quantum": self.quantum,
            "origin": self.origin,
            "end_time": self.end_time,
            "blocks": [asdict(b) for b in self.blocks],
            "results": [asdict(r) for r in self.processes],
        }
