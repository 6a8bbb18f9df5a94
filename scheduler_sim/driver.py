from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .algorithms import ALGORITHMS
from .config import SimulationConfig
from .errors import ConfigurationError
from .models import Operation, RunResult
from .validation import validate_algorithm, validate_horizon, validate_processes

logger = logging.getLogger(__name__)

Reporter = Callable[[RunResult, Operation], None]


def validate_config(config: SimulationConfig) -> None:
    validate_processes(config.processes)
    validate_horizon(config.horizon)
    if not config.algorithms:
        raise ConfigurationError("no algorithms configured")
    for spec in config.algorithms:
        if spec.kind not in ALGORITHMS:
            raise ConfigurationError(f"Unknown or unimplemented algorithm '{spec.label}'")
        validate_algorithm(spec)


def run_simulation(config: SimulationConfig, reporter: Optional[Reporter] = None) -> List[RunResult]:
    """
    Run every configured algorithm in order over the same processes.

    Each run gets its own grid and result vector. The whole configuration is
    validated before the first run so a bad entry never yields partial output.
    """
    validate_config(config)

    results: List[RunResult] = []
    for spec in config.algorithms:
        logger.info("Running %s over %d processes (horizon %d)", spec.label, len(config.processes), config.horizon)
        result = spec.run(config.processes, config.horizon)

        unfinished = [p.name for p, r in zip(result.processes, result.results) if not r.completed]
        if unfinished:
            logger.info("%s: unfinished within horizon: %s", spec.label, ", ".join(unfinished))

        if reporter is not None:
            reporter(result, config.operation)
        results.append(result)

    return results
