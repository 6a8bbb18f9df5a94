import logging

import pytest

from scheduler_sim.config import SimulationConfig, default_config, parse_algorithms
from scheduler_sim.driver import run_simulation
from scheduler_sim.errors import ConfigurationError
from scheduler_sim.metrics import summarize_run
from scheduler_sim.models import Operation, Process


def test_runs_every_configured_algorithm_in_order():
    results = run_simulation(default_config())
    assert [r.algorithm for r in results] == ["FCFS", "RR-2", "SPN", "HRRN"]
    assert [r.finish_times for r in results] == [
        [4, 7, 9],
        [8, 9, 6],
        [4, 9, 6],
        [4, 7, 9],
    ]


def test_each_run_owns_its_grid():
    results = run_simulation(default_config())
    assert len({id(r.timeline) for r in results}) == len(results)
    assert len({id(r.results[0]) for r in results}) == len(results)
    # FCFS waiting marks do not leak into the next run
    assert results[1].timeline.column(2)[2] != results[0].timeline.column(2)[2]


def test_reporter_receives_each_result_with_operation():
    config = default_config()
    config.operation = Operation.STATS
    seen = []
    run_simulation(config, reporter=lambda result, op: seen.append((result.algorithm, op)))
    assert seen == [(label, Operation.STATS) for label in ["FCFS", "RR-2", "SPN", "HRRN"]]


def test_validates_everything_before_first_run():
    config = default_config()
    config.algorithms = parse_algorithms(["fcfs", "srt"])
    seen = []
    with pytest.raises(ConfigurationError, match="SRT"):
        run_simulation(config, reporter=lambda result, op: seen.append(result))
    assert seen == []


@pytest.mark.parametrize(
    "processes, horizon",
    [
        ([], 20),
        ([Process("P1", 0, 0)], 20),
        ([Process("P1", 0, 2)], -5),
    ],
)
def test_rejects_bad_configuration(processes, horizon):
    config = SimulationConfig(processes=processes, algorithms=parse_algorithms(["fcfs"]), horizon=horizon)
    with pytest.raises(ConfigurationError):
        run_simulation(config)


def test_rejects_empty_algorithm_list():
    config = default_config()
    config.algorithms = []
    with pytest.raises(ConfigurationError, match="no algorithms"):
        run_simulation(config)


def test_warns_on_unsorted_arrivals(caplog):
    config = SimulationConfig(
        processes=[Process("B", 3, 1), Process("A", 0, 1)],
        algorithms=parse_algorithms(["fcfs"]),
    )
    with caplog.at_level(logging.WARNING, logger="scheduler_sim"):
        run_simulation(config)
    assert "not sorted by arrival time" in caplog.text


def test_summarize_run():
    fcfs = run_simulation(default_config())[0]
    summary = summarize_run(fcfs)
    assert summary["completed"] == 3
    assert summary["cpu_busy_time"] == 9
    assert summary["makespan"] == 9
    assert summary["avg_turnaround"] == pytest.approx(17 / 3)
    assert summary["avg_normalized_turnaround"] == pytest.approx(6.5 / 3)


def test_summarize_run_ignores_unfinished():
    config = default_config()
    config.horizon = 3
    summary = summarize_run(run_simulation(config)[0])
    assert summary["completed"] == 0
    assert summary["cpu_busy_time"] == 3
    assert summary["avg_turnaround"] == 0.0
