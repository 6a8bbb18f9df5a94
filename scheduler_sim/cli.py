from __future__ import annotations

import argparse
import logging
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import SimulationConfig, default_config, load_config, load_processes, parse_algorithms, parse_operation
from .driver import run_simulation
from .errors import ConfigurationError
from .metrics import summarize_run
from .models import Operation, RunResult
from .report import build_stats_table, build_trace_table, render_stats, render_trace


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="JSON simulation config (processes, algorithms, horizon, operation). "
        "Defaults to the built-in three-process example.",
    )
    parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="JSON or CSV process list overriding the config's processes.",
    )
    parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=None,
        help="Algorithms to run, e.g. 'fcfs rr-2 spn hrrn' or '1,2-2,3,5'.",
    )
    parser.add_argument(
        "--horizon",
        "-n",
        type=int,
        default=None,
        help="Number of simulated instants (default: 20).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduler-sim",
        description="Discrete-time CPU scheduling simulator (FCFS, RR, SPN, HRRN).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run every configured algorithm and print trace or stats.")
    _add_input_arguments(run_parser)
    run_parser.add_argument(
        "--operation",
        "-o",
        choices=[op.value for op in Operation],
        default=None,
        help="trace prints the timeline grid, stats prints completion statistics.",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print plain-text output instead of Rich tables.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run the configured algorithms on the same processes and compare averages.",
    )
    _add_input_arguments(compare_parser)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _build_config(args: argparse.Namespace) -> SimulationConfig:
    config = load_config(args.config) if args.config else default_config()
    if args.workload:
        config.processes = load_processes(args.workload)
    if args.algorithms:
        config.algorithms = parse_algorithms(args.algorithms)
    if args.horizon is not None:
        config.horizon = args.horizon
    if getattr(args, "operation", None):
        config.operation = parse_operation(args.operation)
    return config


def _printer(console: Console, plain: bool):
    def report(result: RunResult, operation: Operation) -> None:
        if operation is Operation.TRACE:
            view = render_trace(result) if plain else build_trace_table(result)
        else:
            view = render_stats(result) if plain else build_stats_table(result)
        console.print(view, markup=False, highlight=False)
        console.print()

    return report


def _print_comparison(results: List[RunResult], console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Completed", justify="right")
    summary_table.add_column("CPU busy", justify="right")
    summary_table.add_column("Makespan", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg norm. turnaround", justify="right")

    for result in results:
        summary = summarize_run(result)
        summary_table.add_row(
            result.algorithm,
            f"{summary['completed']}/{len(result.processes)}",
            str(summary["cpu_busy_time"]),
            str(summary["makespan"]),
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_normalized_turnaround']:.2f}",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    console = Console()

    try:
        config = _build_config(args)
        if args.command == "run":
            run_simulation(config, reporter=_printer(console, args.plain))
            return 0
        if args.command == "compare":
            _print_comparison(run_simulation(config), console)
            return 0
    except (ConfigurationError, OSError) as exc:
        console.print(f"Error: {exc}", style="red", markup=False)
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
