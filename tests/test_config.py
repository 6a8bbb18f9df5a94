import json
from pathlib import Path

import pytest

from scheduler_sim.config import (
    default_config,
    load_config,
    load_processes,
    parse_algorithm,
    parse_algorithms,
)
from scheduler_sim.errors import ConfigurationError
from scheduler_sim.models import AlgorithmKind, AlgorithmSpec, Operation, Process


def test_default_config():
    config = default_config()
    assert [p.name for p in config.processes] == ["P1", "P2", "P3"]
    assert config.processes[1] == Process("P2", arrival_time=1, service_time=3)
    assert [s.label for s in config.algorithms] == ["FCFS", "RR-2", "SPN", "HRRN"]
    assert config.horizon == 20
    assert config.operation is Operation.TRACE


@pytest.mark.parametrize(
    "token, expected",
    [
        ("1", AlgorithmSpec(AlgorithmKind.FCFS)),
        ("2-4", AlgorithmSpec(AlgorithmKind.RR, quantum=4)),
        ("rr-3", AlgorithmSpec(AlgorithmKind.RR, quantum=3)),
        ("SPN", AlgorithmSpec(AlgorithmKind.SPN)),
        (" hrrn ", AlgorithmSpec(AlgorithmKind.HRRN)),
        ("4", AlgorithmSpec(AlgorithmKind.SRT)),
    ],
)
def test_parse_algorithm(token, expected):
    assert parse_algorithm(token) == expected


@pytest.mark.parametrize("token", ["rr", "2", "rr-x", "lottery", ""])
def test_parse_algorithm_rejects(token):
    with pytest.raises(ConfigurationError):
        parse_algorithm(token)


def test_parse_algorithms_accepts_comma_lists():
    specs = parse_algorithms(["1,2-2", "hrrn"])
    assert [s.label for s in specs] == ["FCFS", "RR-2", "HRRN"]


def test_load_config(tmp_path: Path):
    p = tmp_path / "sim.json"
    p.write_text(
        json.dumps(
            {
                "operation": "stats",
                "horizon": 15,
                "algorithms": ["fcfs", "rr-1"],
                "processes": [
                    {"name": "A", "arrival_time": 0, "service_time": 3, "priority": 2},
                    {"name": "B", "arrival_time": 1, "service_time": 2},
                ],
            }
        )
    )
    config = load_config(p)
    assert config.operation is Operation.STATS
    assert config.horizon == 15
    assert [s.label for s in config.algorithms] == ["FCFS", "RR-1"]
    assert config.processes[0].priority == 2
    assert config.processes[1].priority is None


def test_load_config_defaults_algorithms_and_operation(tmp_path: Path):
    p = tmp_path / "sim.json"
    p.write_text('{"processes": [{"name": "A", "arrival_time": 0, "service_time": 1}]}')
    config = load_config(p)
    assert config.operation is Operation.TRACE
    assert config.horizon == 20
    assert len(config.algorithms) == 4


@pytest.mark.parametrize(
    "content",
    [
        "[1, 2]",
        "{not json",
        '{"horizon": 5}',
        '{"processes": [{"name": "A", "arrival_time": "soon", "service_time": 1}]}',
        '{"processes": [], "operation": "animate"}',
        '{"processes": [], "algorithms": null}',
        '{"processes": [], "algorithms": "fcfs"}',
    ],
)
def test_load_config_rejects_malformed(tmp_path: Path, content):
    p = tmp_path / "bad.json"
    p.write_text(content)
    with pytest.raises(ConfigurationError):
        load_config(p)


def test_load_processes_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"name":"A","arrival_time":0,"service_time":3,"priority":1},'
                 '{"name":"B","arrival_time":1,"service_time":2}]')
    procs = load_processes(p)
    assert isinstance(procs[0], Process)
    assert procs[1].priority is None
    assert procs[1].arrival_time == 1


def test_load_processes_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("name,arrival_time,service_time,priority\nA,0,3,1\nB,1,2,\n")
    procs = load_processes(p)
    assert procs[0].name == "A"
    assert procs[0].priority == 1
    assert procs[1].priority is None


def test_load_processes_rejects_unknown_format(tmp_path: Path):
    p = tmp_path / "w.yaml"
    p.write_text("- name: A\n")
    with pytest.raises(ConfigurationError, match="Unsupported"):
        load_processes(p)


def test_load_processes_rejects_invalid_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text("{not json")
    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        load_processes(p)


def test_load_config_algorithms_must_be_a_list(tmp_path: Path):
    p = tmp_path / "sim.json"
    p.write_text('{"processes": [], "algorithms": "fcfs"}')
    with pytest.raises(ConfigurationError, match="must be a list"):
        load_config(p)


@pytest.mark.parametrize(
    "entries, message",
    [
        ([{"name": "A", "arrival_time": 0, "service_time": 1}, {"arrival_time": 1}], r"#1.*missing 'name'"),
        ([{"name": "A", "arrival_time": 0}], r"#0 \(A\).*missing 'service_time'"),
        ([{"name": "A", "arrival_time": "soon", "service_time": 1}], r"#0 \(A\).*'arrival_time' must be an integer"),
        ([{"name": "A", "arrival_time": 0, "service_time": 1, "priority": "high"}], r"'priority'"),
        (["A"], r"#0.*expected an object"),
    ],
)
def test_load_processes_errors_name_the_entry(tmp_path: Path, entries, message):
    p = tmp_path / "w.json"
    p.write_text(json.dumps(entries))
    with pytest.raises(ConfigurationError, match=message):
        load_processes(p)


def test_load_processes_csv_errors_name_the_row(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("name,arrival_time,service_time\nA,0,3\nB,x,2\n")
    with pytest.raises(ConfigurationError, match=r"#1 \(B\)"):
        load_processes(p)
