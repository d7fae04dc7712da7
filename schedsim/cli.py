from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS
from .errors import SimulationError
from .gantt import build_rich_gantt, label, render_gantt
from .generator import generate_processes
from .metrics import summarize
from .models import ScheduleResult
from .server import DEFAULT_HOST, DEFAULT_PORT, serve
from .simulation import DEFAULT_QUANTUM, simulate
from .workload_io import load_workload, save_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTN, RR, Priority, Priority preemptive).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    run_parser.add_argument(
        "--requeue-first",
        action="store_true",
        help="Round robin: re-queue the preempted process before newly arrived ones.",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text Gantt chart instead of the colored one.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help=f"Algorithms to compare (default: {' '.join(ALGORITHMS)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )
    compare_parser.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=None,
        help="Run algorithms on this many worker threads.",
    )

    gen_parser = subparsers.add_parser("generate", help="Generate a random workload.")
    gen_parser.add_argument("--count", "-n", type=int, default=10, help="Number of processes (default: 10).")
    gen_parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible workload.")
    gen_parser.add_argument("--max-burst", type=int, default=100, help="Largest burst time (default: 100).")
    gen_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the workload to this .json or .csv file instead of stdout.",
    )

    serve_parser = subparsers.add_parser("serve", help="Serve the scheduling API over HTTP.")
    serve_parser.add_argument("--host", default=DEFAULT_HOST, help=f"Bind address (default: {DEFAULT_HOST}).")
    serve_parser.add_argument("--port", "-p", type=int, default=DEFAULT_PORT, help=f"Port (default: {DEFAULT_PORT}).")
    serve_parser.add_argument("--debug", action="store_true", help="Run Flask in debug mode.")

    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# (header, justify, cell) for the per-process table.
PROCESS_COLUMNS = (
    ("PID", "center", lambda p: label(p.pid)),
    ("Arrival", "right", lambda p: p.arrival_time),
    ("Burst", "right", lambda p: p.burst_time),
    ("Priority", "center", lambda p: p.priority),
    ("First run", "right", lambda p: p.start_time),
    ("Done", "right", lambda p: p.completion_time),
    ("Waiting", "right", lambda p: p.waiting_time),
    ("Turnaround", "right", lambda p: p.turnaround_time),
    ("Response", "right", lambda p: p.response_time),
)

# (label, cell) for the system metrics table of a single run.
SYSTEM_ROWS = (
    ("Avg waiting", lambda s: f"{s.avg_waiting_time:.2f}"),
    ("Avg turnaround", lambda s: f"{s.avg_turnaround_time:.2f}"),
    ("Avg response", lambda s: f"{s.avg_response_time:.2f}"),
    ("Avg completion", lambda s: f"{s.avg_completion_time:.2f}"),
    ("Makespan", lambda s: s.makespan),
    ("Idle time", lambda s: s.idle_time),
    ("Throughput (proc/time)", lambda s: f"{s.throughput:.3f}"),
    ("CPU utilization", lambda s: f"{s.cpu_utilization:.1f}%"),
)

# (header, summary row key, format) for the comparison table.
COMPARISON_COLUMNS = (
    ("Rank", "wait_rank", "{}"),
    ("Avg waiting", "avg_waiting_time", "{:.2f}"),
    ("Avg turnaround", "avg_turnaround_time", "{:.2f}"),
    ("Avg response", "avg_response_time", "{:.2f}"),
    ("Avg completion", "avg_completion_time", "{:.2f}"),
    ("Makespan", "makespan", "{}"),
    ("Throughput", "throughput", "{:.3f}"),
    ("CPU %", "cpu_utilization", "{:.1f}"),
)


def _table(title: str, first_column: str) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY, title_justify="left")
    table.add_column(first_column)
    return table


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.rule(f"[bold]{escape(result.algorithm)}")

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        console.print(build_rich_gantt(result.timeline))

    processes = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY, title_justify="left")
    for header, justify, _ in PROCESS_COLUMNS:
        processes.add_column(header, justify=justify)
    for p in result.processes:
        processes.add_row(*(str(cell(p)) for _, _, cell in PROCESS_COLUMNS))
    console.print(processes)

    if result.system is not None:
        system = _table("System metrics", "Metric")
        system.add_column("Value", justify="right")
        for name, cell in SYSTEM_ROWS:
            system.add_row(name, str(cell(result.system)))
        console.print(system)


def _print_comparison(results: List[ScheduleResult], title: str, console: Console) -> None:
    table = _table(title, "Algorithm")
    for header, _, _ in COMPARISON_COLUMNS:
        table.add_column(header, justify="right")

    for row in summarize(results):
        cells = [fmt.format(row[key]) for _, key, fmt in COMPARISON_COLUMNS]
        style = "bold green" if row["wait_rank"] == 1 else None
        table.add_row(row["algorithm"], *cells, style=style)

    console.print(table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            results = simulate(
                processes,
                [args.algorithm],
                quantum=args.quantum,
                rr_arrivals_first=not args.requeue_first,
            )
            _print_result(results[0], console, plain=args.plain)
            return 0

        if args.command == "compare":
            workload_path = Path(args.workload)
            processes = load_workload(workload_path)
            results = simulate(processes, args.algorithms, quantum=args.quantum, max_workers=args.jobs)
            _print_comparison(results, f"Algorithm comparison: {workload_path}", console)
            return 0

        if args.command == "generate":
            processes = generate_processes(args.count, burst_range=(1, args.max_burst), seed=args.seed)
            if args.output:
                path = save_workload(processes, args.output)
                logger.info("wrote %d processes to %s", len(processes), path)
            else:
                console.print_json(json.dumps([p.to_dict() for p in processes]))
            return 0

        if args.command == "serve":
            serve(host=args.host, port=args.port, debug=args.debug)
            return 0
    except SimulationError as exc:
        console.print(f"[red]{exc.kind}: {escape(str(exc))}[/red]")
        return 2
    except (OSError, ValueError) as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
