from __future__ import annotations

from typing import Dict, List

from .models import ProcessResult, RunResult


def summarize_run(result: RunResult) -> Dict[str, float]:
    """
    Aggregate one run for side-by-side comparison. Averages only cover
    processes that completed inside the horizon.
    """
    completed: List[ProcessResult] = [r for r in result.results if r.completed]
    cpu_busy_time = sum(result.timeline.running_count(i) for i in range(len(result.processes)))

    if not completed:
        return {
            "completed": 0,
            "cpu_busy_time": cpu_busy_time,
            "makespan": 0,
            "avg_turnaround": 0.0,
            "avg_normalized_turnaround": 0.0,
        }

    n = len(completed)
    return {
        "completed": n,
        "cpu_busy_time": cpu_busy_time,
        "makespan": max(r.finish_time for r in completed),
        "avg_turnaround": sum(r.turnaround_time for r in completed) / n,
        "avg_normalized_turnaround": sum(r.normalized_turnaround for r in completed) / n,
    }
