from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import ConfigurationError
from .models import AlgorithmKind, AlgorithmSpec, Operation, Process

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHMS = ["1", "2-2", "3", "5"]
DEFAULT_HORIZON = 20

_NAMES = {kind.name.lower(): kind for kind in AlgorithmKind}


@dataclass
class SimulationConfig:
    processes: List[Process]
    algorithms: List[AlgorithmSpec] = field(default_factory=list)
    horizon: int = DEFAULT_HORIZON
    operation: Operation = Operation.TRACE


def default_config() -> SimulationConfig:
    """
    Three short processes run under FCFS, RR(2), SPN and HRRN for 20 instants.
    """
    return SimulationConfig(
        processes=[
            Process("P1", arrival_time=0, service_time=4),
            Process("P2", arrival_time=1, service_time=3),
            Process("P3", arrival_time=2, service_time=2),
        ],
        algorithms=parse_algorithms(DEFAULT_ALGORITHMS),
        horizon=DEFAULT_HORIZON,
        operation=Operation.TRACE,
    )


def parse_algorithm(token: str) -> AlgorithmSpec:
    """
    Parse one algorithm token: a classic code or a name, with an optional
    ``-quantum`` suffix (``"2-4"``, ``"rr-4"``, ``"hrrn"``).
    """
    raw = str(token).strip()
    head, sep, tail = raw.partition("-")
    head = head.strip().lower()

    try:
        kind = AlgorithmKind(head)
    except ValueError:
        kind = _NAMES.get(head)
    if kind is None:
        raise ConfigurationError(f"Unknown algorithm '{raw}'")

    quantum = None
    if sep:
        try:
            quantum = int(tail)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid quantum in algorithm '{raw}'") from exc

    if kind is AlgorithmKind.RR and quantum is None:
        raise ConfigurationError(f"Round Robin needs a quantum, e.g. 'rr-2' (got '{raw}')")

    return AlgorithmSpec(kind=kind, quantum=quantum)


def parse_algorithms(tokens: Iterable[str]) -> List[AlgorithmSpec]:
    specs: List[AlgorithmSpec] = []
    for token in tokens:
        # "1,2-4,3" is accepted as well as separate tokens
        specs.extend(parse_algorithm(part) for part in str(token).split(",") if part.strip())
    return specs


def parse_operation(value: str) -> Operation:
    try:
        return Operation(str(value).strip().lower())
    except ValueError as exc:
        raise ConfigurationError(f"Unknown operation '{value}' (use trace or stats)") from exc


def _read_json(path: Path):
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc


def load_config(path: str | Path) -> SimulationConfig:
    """
    Load a full simulation configuration from a JSON document.
    """
    path = Path(path)
    raw = _read_json(path)

    if not isinstance(raw, dict):
        raise ConfigurationError("Configuration must be a JSON object")
    if "processes" not in raw:
        raise ConfigurationError("Configuration is missing 'processes'")

    try:
        horizon = int(raw.get("horizon", DEFAULT_HORIZON))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid horizon: {raw.get('horizon')!r}") from exc

    tokens = raw.get("algorithms", DEFAULT_ALGORITHMS)
    if not isinstance(tokens, list):
        raise ConfigurationError(f"'algorithms' must be a list of algorithm tokens (got {tokens!r})")

    config = SimulationConfig(
        processes=_processes_from_list(raw["processes"]),
        algorithms=parse_algorithms(tokens),
        horizon=horizon,
        operation=parse_operation(raw.get("operation", Operation.TRACE.value)),
    )
    logger.debug(
        "Loaded %s: %d processes, %d algorithms, horizon %d",
        path,
        len(config.processes),
        len(config.algorithms),
        config.horizon,
    )
    return config


def load_processes(path: str | Path) -> List[Process]:
    """
    Load a process list from a JSON or CSV file.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _processes_from_list(_read_json(path))
    if suffix == ".csv":
        with path.open("r", encoding="utf-8", newline="") as f:
            return _processes_from_list(list(csv.DictReader(f)))

    raise ConfigurationError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _int_field(entry, key: str, index: int, name: Optional[str], required: bool = True) -> Optional[int]:
    value = entry.get(key)
    if value in (None, ""):
        if required:
            raise ConfigurationError(f"missing '{key}'", index=index, name=name)
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"'{key}' must be an integer (got {value!r})", index=index, name=name) from exc


def _processes_from_list(raw) -> List[Process]:
    """
    Build processes from JSON objects or CSV rows. Errors name the entry's
    position in the list.
    """
    if not isinstance(raw, list):
        raise ConfigurationError("Processes must be a list of process objects")

    processes: List[Process] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"expected an object, got {entry!r}", index=index)
        name = entry.get("name")
        if name in (None, ""):
            raise ConfigurationError("missing 'name'", index=index)
        name = str(name)
        processes.append(
            Process(
                name=name,
                arrival_time=_int_field(entry, "arrival_time", index, name),
                service_time=_int_field(entry, "service_time", index, name),
                priority=_int_field(entry, "priority", index, name, required=False),
            )
        )
    return processes
