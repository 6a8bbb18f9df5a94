from __future__ import annotations

from typing import List, Optional

from rich import box
from rich.table import Table
from rich.text import Text

from .models import Cell, RunResult

_CELL_STYLES = {
    Cell.RUNNING: "bold green",
    Cell.WAITING: "dim yellow",
    Cell.IDLE: "",
}


def _fmt_int(value: Optional[int]) -> str:
    return "-" if value is None else str(value)


def _fmt_float(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.2f}"


def _mean(values: List[Optional[float]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    return sum(present) / len(present) if present else None


def render_trace(result: RunResult) -> str:
    """
    Plain-text occupancy grid: one row per process, one column per instant.
    """
    names = [p.name for p in result.processes]
    width = max([len(result.algorithm)] + [len(n) for n in names])
    horizon = result.horizon

    ruler = result.algorithm.ljust(width) + "  " + "".join(f"{i % 10} " for i in range(horizon))
    rule = "-" * (width + 2 + horizon * 2)

    lines = [ruler.rstrip(), rule]
    for index, name in enumerate(names):
        cells = "|".join(cell.value for cell in result.timeline.column(index))
        lines.append(f"{name.ljust(width)} |{cells}|")
    lines.append(rule)
    return "\n".join(lines)


def render_stats(result: RunResult) -> str:
    """
    Plain-text statistics table with a trailing mean column. Processes that
    did not finish inside the horizon show '-'.
    """
    label_width = max(len("Turnaround"), len(result.algorithm))
    cols = [p.name for p in result.processes]
    col_width = max([5] + [len(c) for c in cols])

    def row(label: str, values: List[str], mean: str = "") -> str:
        body = "".join(f"|{v:^{col_width + 2}}" for v in values)
        return f"{label.ljust(label_width)}{body}|{mean:^{col_width + 2}}|".rstrip()

    turnarounds = result.turnaround_times
    normalized = result.normalized_turnarounds
    mean_turn = _mean([float(t) if t is not None else None for t in turnarounds])

    lines = [
        result.algorithm,
        row("Process", cols),
        row("Arrival", [str(p.arrival_time) for p in result.processes]),
        row("Service", [str(p.service_time) for p in result.processes], "Mean"),
        row("Finish", [_fmt_int(f) for f in result.finish_times], "-----"),
        row("Turnaround", [_fmt_int(t) for t in turnarounds], _fmt_float(mean_turn)),
        row("NormTurn", [_fmt_float(n) for n in normalized], _fmt_float(_mean(normalized))),
    ]
    return "\n".join(lines)


def format_bursts(result: RunResult) -> str:
    """
    One-line execution order, e.g. "P1 0-2, P2 2-4, P1 4-6".
    """
    slices = result.timeline.slices(result.processes)
    if not slices:
        return "(no execution)"
    return ", ".join(f"{s.name} {s.start_time}-{s.end_time}" for s in slices)


def build_trace_table(result: RunResult) -> Table:
    """
    Rich version of the trace grid with colored RUNNING / WAITING cells and
    the burst order as caption.
    """
    table = Table(
        title=f"{result.algorithm} trace",
        caption=format_bursts(result),
        box=box.SIMPLE_HEAVY,
        padding=(0, 0),
    )
    table.add_column("Process", justify="left")
    for instant in range(result.horizon):
        table.add_column(str(instant % 10), justify="center")

    for index, p in enumerate(result.processes):
        cells = [
            Text(f" {cell.value} ", style=_CELL_STYLES[cell])
            for cell in result.timeline.column(index)
        ]
        table.add_row(Text(p.name, style="bold"), *cells)
    return table


def build_stats_table(result: RunResult) -> Table:
    table = Table(title=f"{result.algorithm} statistics", box=box.SIMPLE_HEAVY)
    headers = ["Process", "Arrive", "Service", "Priority", "Finish", "Turnaround", "NormTurn"]
    for h in headers:
        justify = "center" if h in {"Process", "Priority"} else "right"
        table.add_column(h, justify=justify)

    for p, r in zip(result.processes, result.results):
        table.add_row(
            p.name,
            str(p.arrival_time),
            str(p.service_time),
            "" if p.priority is None else str(p.priority),
            _fmt_int(r.finish_time),
            _fmt_int(r.turnaround_time),
            _fmt_float(r.normalized_turnaround),
            style=None if r.completed else "dim",
        )

    mean_turn = _mean([float(t) if t is not None else None for t in result.turnaround_times])
    table.add_row(
        "Mean", "", "", "", "", _fmt_float(mean_turn), _fmt_float(_mean(result.normalized_turnarounds)),
        style="italic",
    )
    return table
