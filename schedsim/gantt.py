from __future__ import annotations

from typing import Dict, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ExecutionBlock

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]
IDLE_STYLE = "on grey23"


def _time_marks(blocks: Sequence[ExecutionBlock]) -> str:
    """
    Boundary times placed under the column where each block ends.

    A mark that would run into the previous one is dropped, except the final
    end time, which is always shown.
    """
    origin = blocks[0].start
    ends = [b.end for b in blocks]
    marks = str(origin)
    for i, t in enumerate(ends):
        col = t - origin
        if col > len(marks):
            marks = marks.ljust(col) + str(t)
        elif i == len(ends) - 1:
            marks += f" {t}"
    return marks


def render_gantt(blocks: Sequence[ExecutionBlock]) -> str:
    """
    Plain-text Gantt chart: one character per time unit, idle time as dots.
    """
    if not blocks:
        return "(no execution)"

    blocks = sorted(blocks, key=lambda b: b.start)

    line = "|"
    labels = " "
    for b in blocks:
        width = b.duration
        line += ("." if b.is_idle else "=") * width
        labels += ("" if b.is_idle else b.pid[:width]).ljust(width)
    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels.rstrip(),
            _time_marks(blocks),
        ]
    )


def build_rich_gantt(blocks: Sequence[ExecutionBlock]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not blocks:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    blocks = sorted(blocks, key=lambda b: b.start)

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(COLORS)
            pid_to_color[pid] = COLORS[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()

    for b in blocks:
        width = b.duration
        if b.is_idle:
            timeline.append(" " * width, style=IDLE_STYLE)
            labels.append("idle"[:width].ljust(width), style="dim")
            continue

        timeline.append(" " * width, style=f"on {pid_color(b.pid)}")
        labels.append(b.pid[:width].ljust(width), style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, " " + _time_marks(blocks)
