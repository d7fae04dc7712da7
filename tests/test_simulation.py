import pytest

from schedsim import (
    AlgorithmSelection,
    EmptyInputError,
    InvalidProcessError,
    InvalidQuantumError,
    NoAlgorithmSelectedError,
    Process,
    UnknownAlgorithmError,
    simulate,
    validate,
)
from schedsim.generator import generate_processes


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=5, priority=2),
        Process(2, arrival_time=1, burst_time=3, priority=1),
        Process(3, arrival_time=2, burst_time=8, priority=3),
    ]


def test_results_in_request_order():
    results = simulate(_procs(), ["rr", "fcfs", "srtn"])
    assert [r.algorithm for r in results] == ["Round Robin (TQ=2)", "FCFS", "SRTN"]


def test_selection_runs_in_canonical_order():
    results = simulate(_procs(), AlgorithmSelection.all(), quantum=4)
    assert [r.algorithm for r in results] == [
        "FCFS",
        "SJF",
        "SRTN",
        "Round Robin (TQ=4)",
        "Priority (Non-Preemptive)",
        "Priority (Preemptive)",
    ]


def test_selection_from_wire_flags():
    sel = AlgorithmSelection.from_flags({"roundRobin": True, "priorityPreemptive": True, "fcfs": False, "bogus": 1})
    assert sel.names() == ["rr", "priority_preemptive"]


@pytest.mark.parametrize("value", ["false", 1, 0, None])
def test_selection_flags_must_be_booleans(value):
    with pytest.raises(TypeError):
        AlgorithmSelection.from_flags({"fcfs": value, "sjf": True})


def test_default_quantum_applied():
    (result,) = simulate(_procs(), ["rr"])
    assert result.quantum == 2
    assert [p.completion_time for p in result.processes] == [12, 9, 16]


def test_quantum_only_reaches_round_robin():
    results = simulate(_procs(), ["fcfs", "rr"], quantum=3)
    assert results[0].quantum is None
    assert results[1].quantum == 3


def test_rr_variant_flag():
    (result,) = simulate(_procs(), ["rr"], rr_arrivals_first=False)
    assert [p.completion_time for p in result.processes] == [9, 10, 16]


def test_parallel_matches_sequential():
    procs = generate_processes(25, seed=5)
    sequential = simulate(procs, AlgorithmSelection.all())
    parallel = simulate(procs, AlgorithmSelection.all(), max_workers=4)
    assert parallel == sequential


def test_empty_input_rejected():
    with pytest.raises(EmptyInputError):
        simulate([], ["fcfs"])


@pytest.mark.parametrize(
    "bad",
    [
        Process(4, arrival_time=0, burst_time=0),
        Process(4, arrival_time=0, burst_time=-2),
        Process(4, arrival_time=-1, burst_time=2),
        Process(1, arrival_time=0, burst_time=2),
        Process(4, arrival_time=0, burst_time=2.5),
        Process(4, arrival_time=0, burst_time=2, priority="high"),
    ],
)
def test_invalid_process_rejected(bad):
    with pytest.raises(InvalidProcessError):
        simulate(_procs() + [bad], ["fcfs"])


def test_zero_burst_produces_no_results():
    procs = [Process(1, 0, 4), Process(2, 1, 0)]
    with pytest.raises(InvalidProcessError):
        simulate(procs, AlgorithmSelection.all())


@pytest.mark.parametrize("quantum", [0, -1])
def test_invalid_quantum_rejected(quantum):
    with pytest.raises(InvalidQuantumError):
        simulate(_procs(), ["fcfs", "rr"], quantum=quantum)


def test_bad_quantum_ignored_without_round_robin():
    assert validate(_procs(), ["fcfs"], quantum=0) == ["fcfs"]


def test_no_algorithm_selected():
    with pytest.raises(NoAlgorithmSelectedError):
        simulate(_procs(), AlgorithmSelection())
    with pytest.raises(NoAlgorithmSelectedError):
        simulate(_procs(), [])


def test_unknown_algorithm():
    with pytest.raises(UnknownAlgorithmError):
        simulate(_procs(), ["fcfs", "lottery"])


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        simulate([], ["fcfs"])


def test_input_list_untouched():
    procs = _procs()
    before = list(procs)
    simulate(procs, AlgorithmSelection.all())
    assert procs == before
