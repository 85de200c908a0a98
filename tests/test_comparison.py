import pytest

from energy_scheduler import (
    Comparison,
    ExperimentResults,
    compare,
    run_adaptive,
    run_experiment,
    run_fixed,
    sample_workloads,
)


def test_compare_with_itself_is_zero(reference):
    high = run_fixed(reference, "HIGH")
    c = compare(high, high)
    assert c.energy_saved == 0
    assert c.savings_pct == 0
    assert c.slowdown_pct == 0


def test_compare_low_against_high(reference):
    high = run_fixed(reference, "HIGH")
    low = run_fixed(reference, "LOW")
    c = compare(high, low)

    assert c.energy_saved == pytest.approx(6.912e-4 - 3.072e-4)
    assert c.savings_pct == pytest.approx(100 * (6.912 - 3.072) / 6.912)
    assert c.slowdown_pct == pytest.approx(100)


def test_compare_as_dict(reference):
    high = run_fixed(reference, "HIGH")
    adaptive = run_adaptive(reference)
    d = compare(high, adaptive).as_dict()

    assert set(d) == {"energy_saved", "savings_pct", "slowdown_pct"}
    assert d["energy_saved"] == high.total_energy - adaptive.total_energy
    assert d["slowdown_pct"] == pytest.approx((34 - 24) / 24 * 100)


def test_experiment_runs_all_three_policies(reference):
    experiment = run_experiment(reference)

    assert isinstance(experiment, ExperimentResults)
    assert list(experiment.results()) == ["HIGH", "LOW", "DYNAMIC"]
    assert experiment.high == run_fixed(reference, "HIGH")
    assert experiment.low == run_fixed(reference, "LOW")
    assert experiment.adaptive == run_adaptive(reference, 15)


def test_experiment_comparisons(reference):
    experiment = run_experiment(reference, threshold=15)
    comparisons = experiment.comparisons()

    assert list(comparisons) == ["LOW", "DYNAMIC"]
    assert all(isinstance(c, Comparison) for c in comparisons.values())
    assert comparisons["LOW"] == compare(experiment.high, experiment.low)
    assert comparisons["LOW"].savings_pct > comparisons["DYNAMIC"].savings_pct > 0


def test_restart_gives_identical_results(reference):
    assert run_experiment(reference) == run_experiment(reference)


def test_sample_workloads_run():
    for label, procs in sample_workloads():
        experiment = run_experiment(procs)
        assert experiment.low.total_energy < experiment.high.total_energy, label
        assert experiment.high.makespan <= experiment.adaptive.makespan <= experiment.low.makespan
