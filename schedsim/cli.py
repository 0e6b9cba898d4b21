from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, simulate
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .metrics import compute_aggregate_metrics
from .models import Process, SimulationResult
from .workload_io import load_workload, sample_workload

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2


def _add_workload_args(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--workload",
        "-w",
        help="Path to JSON or CSV workload file.",
    )
    source.add_argument(
        "--sample",
        action="store_true",
        help="Use the built-in five-process demo workload.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, Priority, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log scheduling decisions (-v for a summary, -vv for every dispatch).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, srtf, priority, rr).",
    )
    _add_workload_args(run_parser)
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of tables.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    _add_workload_args(compare_parser)
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: fcfs sjf srtf priority rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(verbosity: int, console: Console) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _workload_from_args(args: argparse.Namespace) -> List[Process]:
    if args.sample:
        return sample_workload()
    processes = load_workload(Path(args.workload))
    logger.info("Loaded %d processes from %s", len(processes), args.workload)
    return processes


def _print_result(result: SimulationResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.blocks)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            escape(p.pid),
            str(p.arrival),
            str(p.burst),
            str(p.priority),
            str(p.start),
            str(p.completion),
            str(p.turnaround),
            str(p.waiting),
            str(p.response),
        )

    console.print(proc_table)
    console.print()

    agg = compute_aggregate_metrics(result)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg completion", f"{agg.avg_completion:.2f}")
    sys_table.add_row("Avg turnaround", f"{agg.avg_turnaround:.2f}")
    sys_table.add_row("Avg waiting", f"{agg.avg_waiting:.2f}")
    sys_table.add_row("Avg response", f"{agg.avg_response:.2f}")
    sys_table.add_row("Throughput (proc/time)", f"{agg.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{agg.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_json(result: SimulationResult, console: Console) -> None:
    payload = result.to_dict()
    payload["metrics"] = asdict(compute_aggregate_metrics(result))
    console.print_json(json.dumps(payload))


def _run_compare(processes: List[Process], algorithms: List[str], quantum: int, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg completion", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Throughput", justify="right")

    for alg in algorithms:
        result = simulate(alg, processes, quantum=quantum)
        agg = compute_aggregate_metrics(result)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{agg.avg_completion:.2f}",
            f"{agg.avg_turnaround:.2f}",
            f"{agg.avg_waiting:.2f}",
            f"{agg.avg_response:.2f}",
            f"{agg.throughput:.3f}",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    configure_logging(args.verbose, console)

    try:
        processes = _workload_from_args(args)

        if args.command == "run":
            result = simulate(args.algorithm, processes, quantum=args.quantum)
            if args.json:
                _print_json(result, console)
            else:
                _print_result(result, console)
            return 0

        if args.command == "compare":
            _run_compare(processes, args.algorithms, args.quantum, console)
            return 0
    except (SchedulerError, OSError) as exc:
        logger.debug("simulation aborted", exc_info=True)
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
