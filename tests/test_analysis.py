import matplotlib.pyplot as plt
import pytest

from e91_qkd.analysis import (
    chsh_deviation_bound,
    create_sweep_plots,
    default_pair_counts,
    run_parameter_sweep,
    sweep_to_dataframe,
    trials_to_dataframe,
)
from e91_qkd.models import SimulationConfig
from e91_qkd.protocol import run_e91
from e91_qkd.visualization import create_results_plots


@pytest.fixture(scope="module")
def pair_sweep():
    return run_parameter_sweep(SimulationConfig(seed=11), "num_pairs", [200, 2000, 20000])


def test_sweep_runs_each_value(pair_sweep):
    assert [val for val, _ in pair_sweep] == [200, 2000, 20000]
    assert [r.num_pairs for _, r in pair_sweep] == [200, 2000, 20000]
    assert all(r.seed == 11 for _, r in pair_sweep)


def test_sweep_progress_callback():
    progress = []
    run_parameter_sweep(SimulationConfig(num_pairs=100), "seed", [1, 2],
                        progress_callback=lambda p, m: progress.append(p))
    assert progress == [0.5, 1.0]


def test_sweep_rejects_unknown_parameter():
    with pytest.raises(ValueError):
        run_parameter_sweep(SimulationConfig(), "angle", [1])


def test_sweep_dataframe(pair_sweep):
    df = sweep_to_dataframe(pair_sweep, "num_pairs")
    assert len(df) == 3
    for column in ("key_length", "chsh_S", "chsh_S_theory", "chsh_deviation",
                   "chsh_deviation_bound", "error_rate", "bell_violated"):
        assert column in df.columns
    # the Chernoff band shrinks with more pairs
    assert df["chsh_deviation_bound"].is_monotonic_decreasing


def test_deviation_bound_empty_run():
    with pytest.warns(UserWarning):
        results = run_e91(0, seed=1)
    assert chsh_deviation_bound(results.bell_test) == pytest.approx(4.0)


def test_sweep_plots(pair_sweep):
    plots = create_sweep_plots(pair_sweep, "num_pairs")
    assert set(plots) == {"chsh_vs_param", "key_vs_param", "convergence"}
    for fig in plots.values():
        plt.close(fig)


def test_trials_dataframe(history_seed42):
    df = trials_to_dataframe(history_seed42)
    assert list(df.columns) == ["alice_basis", "bob_basis", "alice_outcome", "bob_outcome", "bases_match"]
    assert len(df) == 1000
    assert df["bases_match"].sum() == sum(t.bases_match for t in history_seed42)


def test_trials_dataframe_empty():
    assert len(trials_to_dataframe(())) == 0


def test_default_pair_counts():
    counts = default_pair_counts(100000, 6)
    assert counts[0] == 100
    assert counts[-1] == 100000
    assert counts == sorted(counts)
    assert default_pair_counts(10) == [100]


def test_results_plots():
    fig = create_results_plots(run_e91(1000, seed=42))
    assert len(fig.axes) >= 6
    plt.close(fig)


def test_results_plots_empty_run():
    with pytest.warns(UserWarning):
        results = run_e91(0, seed=42)
    fig = create_results_plots(results)
    plt.close(fig)
