from __future__ import annotations

import logging
from typing import List

from .errors import ConfigurationError
from .models import AlgorithmKind, AlgorithmSpec, Process

logger = logging.getLogger(__name__)


def validate_processes(processes: List[Process]) -> None:
    """
    Check the process preconditions every strategy relies on.

    An arrival order that is not non-decreasing is accepted (FCFS serves list
    order regardless) but reported as a warning.
    """
    if not processes:
        raise ConfigurationError("process list is empty")

    for index, p in enumerate(processes):
        if p.arrival_time < 0:
            raise ConfigurationError(
                f"arrival_time must be >= 0 (got {p.arrival_time})", index=index, name=p.name
            )
        if p.service_time <= 0:
            raise ConfigurationError(
                f"service_time must be > 0 (got {p.service_time})", index=index, name=p.name
            )

    for index in range(1, len(processes)):
        if processes[index].arrival_time < processes[index - 1].arrival_time:
            logger.warning(
                "Process list is not sorted by arrival time (%s arrives before %s); "
                "FCFS will still serve list order",
                processes[index].name,
                processes[index - 1].name,
            )
            break


def validate_horizon(horizon: int) -> None:
    if horizon <= 0:
        raise ConfigurationError(f"horizon must be > 0 (got {horizon})")


def validate_algorithm(spec: AlgorithmSpec) -> None:
    if spec.kind is AlgorithmKind.RR and (spec.quantum is None or spec.quantum <= 0):
        raise ConfigurationError(f"Round Robin requires a positive quantum (got {spec.quantum})")
