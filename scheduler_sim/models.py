from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    name: str
    arrival_time: int
    service_time: int
    priority: Optional[int] = None


class Cell(str, Enum):
    IDLE = " "
    RUNNING = "*"
    WAITING = "."


class Operation(str, Enum):
    TRACE = "trace"
    STATS = "stats"


class AlgorithmKind(str, Enum):
    """
    Scheduling policies, valued by their classic single-character codes.
    """

    FCFS = "1"
    RR = "2"
    SPN = "3"
    SRT = "4"
    HRRN = "5"


@dataclass(frozen=True)
class AlgorithmSpec:
    kind: AlgorithmKind
    quantum: Optional[int] = None

    @property
    def label(self) -> str:
        if self.kind is AlgorithmKind.RR:
            return f"RR-{self.quantum}"
        return self.kind.name

    def run(self, processes: List[Process], horizon: int) -> "RunResult":
        from .algorithms import run_algorithm

        return run_algorithm(self, processes, horizon)


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process, derived from the grid.
    """

    index: int
    name: str
    start_time: int
    end_time: int


class Timeline:
    """
    Per-instant, per-process occupancy grid.

    Cells are addressed as ``[instant][process_index]``. Every cell starts
    out IDLE; marks outside ``[0, horizon)`` are dropped.
    """

    def __init__(self, horizon: int, process_count: int):
        self.horizon = horizon
        self.process_count = process_count
        self.cells: List[List[Cell]] = [[Cell.IDLE] * process_count for _ in range(horizon)]

    def mark(self, instant: int, index: int, cell: Cell) -> None:
        if 0 <= instant < self.horizon:
            self.cells[instant][index] = cell

    def mark_range(self, start: int, end: int, index: int, cell: Cell) -> None:
        for instant in range(max(start, 0), min(end, self.horizon)):
            self.cells[instant][index] = cell

    def column(self, index: int) -> List[Cell]:
        return [row[index] for row in self.cells]

    def running_count(self, index: int) -> int:
        return sum(1 for row in self.cells if row[index] is Cell.RUNNING)

    def running_at(self, instant: int) -> Optional[int]:
        """
        Index of the process holding the CPU at ``instant``, or None if idle.
        """
        for index, cell in enumerate(self.cells[instant]):
            if cell is Cell.RUNNING:
                return index
        return None

    def slices(self, processes: List[Process]) -> List[ScheduledSlice]:
        """
        Collapse the grid into contiguous execution slices ordered by start.
        """
        result: List[ScheduledSlice] = []
        current: Optional[ScheduledSlice] = None
        for instant in range(self.horizon):
            index = self.running_at(instant)
            if current is not None and current.index == index and current.end_time == instant:
                current.end_time = instant + 1
                continue
            if index is None:
                current = None
                continue
            current = ScheduledSlice(
                index=index,
                name=processes[index].name,
                start_time=instant,
                end_time=instant + 1,
            )
            result.append(current)
        return result


@dataclass
class ProcessResult:
    """
    Completion statistics for one process. All fields stay None when the
    process does not finish inside the horizon.
    """

    finish_time: Optional[int] = None
    turnaround_time: Optional[int] = None
    normalized_turnaround: Optional[float] = None

    @property
    def completed(self) -> bool:
        return self.finish_time is not None

    def record(self, process: Process, finish_time: int) -> None:
        self.finish_time = finish_time
        self.turnaround_time = finish_time - process.arrival_time
        self.normalized_turnaround = self.turnaround_time / process.service_time


@dataclass
class RunResult:
    spec: AlgorithmSpec
    processes: List[Process]
    horizon: int
    timeline: Timeline
    results: List[ProcessResult] = field(default_factory=list)

    @classmethod
    def empty(cls, spec: AlgorithmSpec, processes: List[Process], horizon: int) -> "RunResult":
        return cls(
            spec=spec,
            processes=list(processes),
            horizon=horizon,
            timeline=Timeline(horizon, len(processes)),
            results=[ProcessResult() for _ in processes],
        )

    @property
    def algorithm(self) -> str:
        return self.spec.label

    @property
    def finish_times(self) -> List[Optional[int]]:
        return [r.finish_time for r in self.results]

    @property
    def turnaround_times(self) -> List[Optional[int]]:
        return [r.turnaround_time for r in self.results]

    @property
    def normalized_turnarounds(self) -> List[Optional[float]]:
        return [r.normalized_turnaround for r in self.results]

    def complete(self, index: int, finish_time: int) -> None:
        self.results[index].record(self.processes[index], finish_time)
