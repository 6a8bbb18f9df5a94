from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Tuple

from .errors import ConfigurationError
from .models import AlgorithmKind, AlgorithmSpec, Cell, Process, RunResult
from .validation import validate_algorithm, validate_horizon, validate_processes

logger = logging.getLogger(__name__)

Selector = Callable[[List[Process], List[int], int], int]


def _serve_to_completion(result: RunResult, index: int, start: int) -> int:
    """
    Mark one non-preemptive burst and record the finish if it fits in the
    horizon. Returns the clock after the burst, clipped to the horizon.
    """
    p = result.processes[index]
    end = start + p.service_time
    result.timeline.mark_range(start, end, index, Cell.RUNNING)
    if end <= result.horizon:
        result.complete(index, end)
    else:
        logger.debug("%s truncated by horizon %d (needs until %d)", p.name, result.horizon, end)
    return min(end, result.horizon)


def schedule_fcfs(processes: List[Process], horizon: int, quantum: Optional[int] = None) -> RunResult:
    """
    First-Come First-Serve (non-preemptive).

    Processes are served in list order; the list is not re-sorted.
    """
    result = RunResult.empty(AlgorithmSpec(AlgorithmKind.FCFS), processes, horizon)

    time = 0
    for index, p in enumerate(processes):
        start = max(time, p.arrival_time)
        result.timeline.mark_range(p.arrival_time, start, index, Cell.WAITING)
        result.timeline.mark_range(start, start + p.service_time, index, Cell.RUNNING)

        finish = start + p.service_time
        if finish <= horizon:
            result.complete(index, finish)
        time = finish

    return result


def schedule_rr(processes: List[Process], horizon: int, quantum: Optional[int] = None) -> RunResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Arrivals are admitted after every instant of service, so anything that
    arrives during a burst is queued ahead of the preempted process.
    """
    spec = AlgorithmSpec(AlgorithmKind.RR, quantum)
    validate_algorithm(spec)
    result = RunResult.empty(spec, processes, horizon)

    # Ready queue of (process index, remaining service)
    ready: Deque[Tuple[int, int]] = deque()
    admitted = 0
    time = 0

    def admit_arrivals(current_time: int) -> None:
        nonlocal admitted
        while admitted < len(processes) and processes[admitted].arrival_time <= current_time:
            ready.append((admitted, processes[admitted].service_time))
            admitted += 1

    admit_arrivals(time)

    while time < horizon:
        if not ready:
            if admitted == len(processes):
                break
            time += 1
            admit_arrivals(time)
            continue

        index, remaining = ready.popleft()
        burst = min(quantum, remaining)
        served = 0
        while served < burst and time < horizon:
            result.timeline.mark(time, index, Cell.RUNNING)
            time += 1
            served += 1
            admit_arrivals(time)
        remaining -= served

        if remaining > 0:
            ready.append((index, remaining))
        else:
            result.complete(index, time)

    return result


def _shortest_service(processes: List[Process], ready: List[int], time: int) -> int:
    selected = ready[0]
    for index in ready[1:]:
        if processes[index].service_time < processes[selected].service_time:
            selected = index
    return selected


def response_ratio(process: Process, time: int) -> float:
    wait = time - process.arrival_time
    return (wait + process.service_time) / process.service_time


def _highest_response_ratio(processes: List[Process], ready: List[int], time: int) -> int:
    selected = ready[0]
    best = response_ratio(processes[selected], time)
    for index in ready[1:]:
        ratio = response_ratio(processes[index], time)
        if ratio > best:
            selected, best = index, ratio
    return selected


def _schedule_nonpreemptive(
    spec: AlgorithmSpec, processes: List[Process], horizon: int, select: Selector
) -> RunResult:
    """
    Shared skeleton for SPN and HRRN: whenever the CPU is free, pick one of
    the arrived, unfinished processes and run it to completion. Candidates
    are offered in list order, so selectors that only replace on a strict
    improvement give ties to the earliest index.
    """
    result = RunResult.empty(spec, processes, horizon)
    done = [False] * len(processes)

    time = 0
    while time < horizon and not all(done):
        ready = [i for i, p in enumerate(processes) if not done[i] and p.arrival_time <= time]
        if not ready:
            time += 1
            continue

        index = select(processes, ready, time)
        logger.debug("%s: t=%d selected %s from %d ready", spec.label, time, processes[index].name, len(ready))
        time = _serve_to_completion(result, index, time)
        done[index] = True

    return result


def schedule_spn(processes: List[Process], horizon: int, quantum: Optional[int] = None) -> RunResult:
    """
    Shortest Process Next (non-preemptive).

    Among arrived processes, choose the smallest service time; ties go to the
    earliest process in the list.
    """
    return _schedule_nonpreemptive(AlgorithmSpec(AlgorithmKind.SPN), processes, horizon, _shortest_service)


def schedule_hrrn(processes: List[Process], horizon: int, quantum: Optional[int] = None) -> RunResult:
    """
    Highest Response Ratio Next (non-preemptive).

    The ratio (wait + service) / service is recomputed at every decision. It
    grows while a process waits, so no process starves.
    """
    return _schedule_nonpreemptive(
        AlgorithmSpec(AlgorithmKind.HRRN), processes, horizon, _highest_response_ratio
    )


ALGORITHMS: Dict[AlgorithmKind, Callable[..., RunResult]] = {
    AlgorithmKind.FCFS: schedule_fcfs,
    AlgorithmKind.RR: schedule_rr,
    AlgorithmKind.SPN: schedule_spn,
    AlgorithmKind.HRRN: schedule_hrrn,
}


def run_algorithm(spec: AlgorithmSpec, processes: List[Process], horizon: int) -> RunResult:
    """
    Validate the inputs and dispatch to the strategy registered for the spec.
    """
    if spec.kind not in ALGORITHMS:
        raise ConfigurationError(f"Unknown or unimplemented algorithm '{spec.label}'")
    validate_processes(processes)
    validate_horizon(horizon)
    validate_algorithm(spec)

    func = ALGORITHMS[spec.kind]
    result = func(processes, horizon, quantum=spec.quantum)
    logger.debug(
        "%s finished: %d/%d processes completed within horizon %d",
        spec.label,
        sum(1 for r in result.results if r.completed),
        len(processes),
        horizon,
    )
    return result
