from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List

from .errors import InvalidInput
from .models import Process

SAMPLE_WORKLOAD = (
    ("P1", 0, 7, 2),
    ("P2", 2, 4, 1),
    ("P3", 4, 1, 3),
    ("P4", 5, 4, 4),
    ("P5", 6, 6, 2),
)


def sample_workload() -> List[Process]:
    """The built-in five-process demo set."""
    return [Process(pid, arrival, burst, priority) for pid, arrival, burst, priority in SAMPLE_WORKLOAD]


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise InvalidInput(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"Workload is not valid UTF-8: {path} ({exc.reason})") from exc
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"{path}: not valid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise InvalidInput("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        try:
            for row in reader:
                processes.append(_process_from_mapping(row))
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"Workload is not valid UTF-8: {path} ({exc.reason})") from exc
    return processes


def _as_pid(value, mapping) -> str:
    # JSON null, lists, objects and booleans are not identifiers
    if isinstance(value, bool) or not isinstance(value, (str, int)) or not str(value).strip():
        raise InvalidInput(f"PID missing in entry: {mapping!r}")
    return str(value).strip()


def _as_int(value) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"fractional time value {value!r}")
    return int(value)


def _as_priority(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def _field(mapping, short: str, long: str):
    if short in mapping:
        return mapping[short]
    return mapping[long]


def _process_from_mapping(mapping) -> Process:
    if not isinstance(mapping, dict):
        raise InvalidInput(f"Invalid process entry: {mapping!r}")

    pid = _as_pid(mapping.get("pid"), mapping)
    try:
        arrival = _as_int(_field(mapping, "arrival", "arrival_time"))
        burst = _as_int(_field(mapping, "burst", "burst_time"))
        priority_val = mapping.get("priority")
        priority = _as_priority(priority_val) if priority_val not in (None, "") else 0
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid process entry: {mapping!r}") from exc

    return Process(pid=pid, arrival=arrival, burst=burst, priority=priority)
