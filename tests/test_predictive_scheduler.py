import pytest

from energy_scheduler import (
    PredictiveDVFSScheduler,
    Process,
    run_adaptive,
    run_fixed,
)


def test_reference_batch_threshold_15(reference):
    result = run_adaptive(reference, 15)

    # remaining work per step: 24, 18, 10, 3
    assert result.levels_used == ("HIGH", "HIGH", "LOW", "LOW")
    assert [p.actual_execution_time for p in result.processes] == [6, 8, 14, 6]
    assert [p.completion_time for p in result.processes] == [6, 14, 28, 34]
    assert result.makespan == 34
    assert result.total_energy == pytest.approx(2.88e-5 * 14 + 6.4e-6 * 20)


def test_default_threshold_is_15(reference):
    assert run_adaptive(reference) == run_adaptive(reference, 15)


def test_sits_between_high_and_low(reference):
    high = run_fixed(reference, "HIGH")
    low = run_fixed(reference, "LOW")
    adaptive = run_adaptive(reference)
    assert low.total_energy < adaptive.total_energy < high.total_energy
    assert high.makespan < adaptive.makespan < low.makespan


def test_remaining_equal_to_threshold_selects_low():
    procs = [Process(1, 0, 5), Process(2, 0, 5)]
    result = run_adaptive(procs, 10)
    assert result.levels_used == ("LOW", "LOW")
    result = run_adaptive(procs, 9.99)
    assert result.levels_used == ("HIGH", "LOW")


def test_threshold_below_smallest_remaining_reduces_to_high(reference):
    # the smallest remaining work is the last burst (3)
    adaptive = run_adaptive(reference, 2.5)
    high = run_fixed(reference, "HIGH")
    assert adaptive.levels_used == ("HIGH",) * 4
    assert adaptive.processes == high.processes
    assert adaptive.total_energy == high.total_energy
    assert adaptive.makespan == high.makespan


def test_threshold_at_total_work_reduces_to_low(reference):
    adaptive = run_adaptive(reference, 24)
    low = run_fixed(reference, "LOW")
    assert adaptive.levels_used == ("LOW",) * 4
    assert adaptive.processes == low.processes
    assert adaptive.average_waiting_time == low.average_waiting_time
    assert adaptive.total_energy == low.total_energy


def test_remaining_work_follows_arrival_order():
    # sorted order is 2, 3, 1 -> remaining 9, 5, 1
    procs = [Process(1, 9, 1), Process(2, 0, 4), Process(3, 2, 4)]
    result = run_adaptive(procs, 5)
    assert [p.pid for p in result.processes] == [2, 3, 1]
    assert result.levels_used == ("HIGH", "LOW", "LOW")


def test_matches_full_recomputation_of_remaining_work():
    procs = [Process(i, i % 3, (i * 7) % 5 + 1) for i in range(1, 30)]
    threshold = 20
    result = run_adaptive(procs, threshold)

    ordered = sorted(procs, key=lambda p: p.arrival_time)
    expected = [
        "HIGH" if sum(q.burst_time for q in ordered[i:]) > threshold else "LOW"
        for i in range(len(ordered))
    ]
    assert list(result.levels_used) == expected


def test_identities_hold(reference):
    result = PredictiveDVFSScheduler(threshold=12).run(reference)
    n = len(reference)
    assert sum(p.waiting_time for p in result.processes) / n == result.average_waiting_time
    for p in result.processes:
        assert p.completion_time == pytest.approx(p.arrival_time + p.waiting_time + p.burst_time, abs=1e-9)
    assert result.makespan == result.processes[-1].completion_time
    assert result.name == "FCFS + Predictive DVFS"


def test_fractional_remaining_work_on_the_threshold():
    # 0.1 + 0.2 + 0.3 sums to just above 0.6 front to back
    procs = [Process(1, 0, 0.1), Process(2, 0, 0.2), Process(3, 0, 0.3)]
    threshold = 0.6
    result = run_adaptive(procs, threshold)

    expected = [
        "HIGH" if sum(q.burst_time for q in procs[i:]) > threshold else "LOW"
        for i in range(len(procs))
    ]
    assert expected == ["HIGH", "LOW", "LOW"]
    assert list(result.levels_used) == expected
