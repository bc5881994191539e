"""
================================================================================
PARAMETRIC SWEEP ANALYSIS FOR E91 QKD
================================================================================

Functions for running parametric sweeps, tabulating results with pandas and
plotting how the CHSH statistic converges to its theoretical value.

Author: E91 QKD Simulation Team
Date: 2025

================================================================================
"""

import copy
import logging
from typing import Callable, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .config import QuantumConstants
from .models import BellTestResult, ProtocolResults, SimulationConfig, TrialRecord, history_arrays
from .protocol import E91Protocol
from .quantum_math import chernoff_bound, theoretical_chsh_value

logger = logging.getLogger(__name__)

SWEEPABLE_PARAMETERS = ("num_pairs", "seed")


# ============================================================================
# PARAMETRIC SWEEP
# ============================================================================

def run_parameter_sweep(
    base_config: SimulationConfig,
    param_name: str,
    param_values: Sequence[int],
    progress_callback: Optional[Callable[[float, str], None]] = None
) -> List[Tuple[int, ProtocolResults]]:
    """
    Run parametric sweep over a range of parameter values.

    Args:
        base_config: Base simulation configuration
        param_name: "num_pairs" or "seed"
        param_values: Values for the parameter
        progress_callback: Optional callback function(progress, message)

    Returns:
        List of tuples (parameter_value, ProtocolResults)
    """
    if param_name not in SWEEPABLE_PARAMETERS:
        raise ValueError(f"Parameter '{param_name}' cannot be swept; choose one of {SWEEPABLE_PARAMETERS}")

    results = []
    for i, val in enumerate(param_values):
        config = copy.deepcopy(base_config)
        setattr(config, param_name, val)

        if progress_callback:
            progress_callback((i + 1) / len(param_values),
                              f"Sweep {i+1}/{len(param_values)}: {param_name}={val}")

        result = E91Protocol(config).run()
        logger.debug("Sweep %s=%s -> S=%.4f", param_name, val, result.chsh_S)
        results.append((val, result))

    return results


def chsh_deviation_bound(bell_test: BellTestResult, epsilon: float = 0.05) -> float:
    """
    Chernoff-style bound on |S_measured - S_expected|.

    Each correlator is E = 2p - 1 for an agreement frequency p, so its
    deviation is at most 2δ; the four deviations add up in S.
    """
    return float(sum(2 * chernoff_bound(stat.total, epsilon) for stat in bell_test.correlations))


# ============================================================================
# TABULATION
# ============================================================================

def trials_to_dataframe(trials: Sequence[TrialRecord]) -> pd.DataFrame:
    """Trial history as a DataFrame, one row per pair."""
    alice_bases, bob_bases, alice_results, bob_results = history_arrays(trials)
    return pd.DataFrame(
        {
            "alice_basis": alice_bases,
            "bob_basis": bob_bases,
            "alice_outcome": alice_results,
            "bob_outcome": bob_results,
            "bases_match": alice_bases == bob_bases,
        },
        columns=["alice_basis", "bob_basis", "alice_outcome", "bob_outcome", "bases_match"],
    )


def sweep_to_dataframe(
    sweep_results: List[Tuple[int, ProtocolResults]],
    param_name: str,
    epsilon: float = 0.05,
) -> pd.DataFrame:
    """Flatten sweep results into one row per run."""
    s_theory = theoretical_chsh_value()
    rows = []
    for val, r in sweep_results:
        rows.append({
            param_name: val,
            "num_pairs": r.num_pairs,
            "seed": r.seed,
            "key_length": len(r.sifted_key),
            "key_efficiency": r.key_efficiency,
            "chsh_S": r.chsh_S,
            "chsh_S_theory": s_theory,
            "chsh_deviation": abs(r.chsh_S - s_theory),
            "chsh_deviation_bound": chsh_deviation_bound(r.bell_test, epsilon),
            "error_rate": r.error_rate,
            "bell_violated": r.bell_test.violated,
        })
    return pd.DataFrame(rows)


# ============================================================================
# SWEEP PLOTS
# ============================================================================

def create_sweep_plots(
    sweep_results: List[Tuple[int, ProtocolResults]],
    param_name: str,
    param_label: Optional[str] = None
) -> dict:
    """
    Create sweep plots from parametric sweep results.

    Args:
        sweep_results: List of (parameter_value, ProtocolResults) tuples
        param_name: Name of parameter that was swept
        param_label: Human-readable parameter label (optional)

    Returns:
        Dictionary of matplotlib figures {plot_name: figure}
    """
    if param_label is None:
        param_label = param_name.replace('_', ' ').title()

    df = sweep_to_dataframe(sweep_results, param_name)
    param_vals = df[param_name].to_numpy()
    s_theory = theoretical_chsh_value()

    plots = {}

    # Plot 1: CHSH vs Parameter, with deviation bound
    fig1, ax1 = plt.subplots(figsize=(8, 6))
    ax1.plot(param_vals, df["chsh_S"], 'go-', linewidth=2, alpha=0.7, label='Measured S')
    ax1.fill_between(param_vals,
                     s_theory - df["chsh_deviation_bound"],
                     s_theory + df["chsh_deviation_bound"],
                     color='green', alpha=0.12, label='Chernoff band (95%)')
    ax1.axhline(y=s_theory, color='green', linestyle=':', linewidth=2, label=f'Model S ({s_theory:.3f})')
    ax1.axhline(y=QuantumConstants.CHSH_CLASSICAL_BOUND, color='red', linestyle='--', linewidth=2,
                label='Classical Bound')
    ax1.axhline(y=QuantumConstants.CHSH_QUANTUM_MAX, color='blue', linestyle='--', linewidth=2,
                label='Tsirelson Bound')
    if param_name == "num_pairs":
        ax1.set_xscale('log')
    ax1.set_xlabel(param_label, fontsize=12, fontweight='bold')
    ax1.set_ylabel('CHSH S', fontsize=12, fontweight='bold')
    ax1.set_title(f'CHSH S vs {param_label}', fontsize=14, fontweight='bold')
    ax1.set_ylim(0, 3.2)
    ax1.grid(True, alpha=0.3)
    ax1.legend()
    plt.tight_layout()
    plots['chsh_vs_param'] = fig1

    # Plot 2: Key length vs Parameter
    fig2, ax2 = plt.subplots(figsize=(8, 6))
    ax2.plot(param_vals, df["key_length"], 'bo-', linewidth=2, alpha=0.7)
    ax2.set_xlabel(param_label, fontsize=12, fontweight='bold')
    ax2.set_ylabel('Sifted Key Length (bits)', fontsize=12, fontweight='bold')
    ax2.set_title(f'Sifted Key Length vs {param_label}', fontsize=14, fontweight='bold')
    ax2.grid(True, alpha=0.3)
    plt.tight_layout()
    plots['key_vs_param'] = fig2

    # Plot 3: Convergence of |S - S_model|
    fig3, ax3 = plt.subplots(figsize=(8, 6))
    ax3.plot(param_vals, df["chsh_deviation"], 'rs-', linewidth=2, alpha=0.7, label='|S - S_model|')
    ax3.plot(param_vals, df["chsh_deviation_bound"], 'k--', linewidth=1.5, label='Chernoff bound')
    if param_name == "num_pairs":
        ax3.set_xscale('log')
        ax3.set_yscale('log')
    ax3.set_xlabel(param_label, fontsize=12, fontweight='bold')
    ax3.set_ylabel('Deviation', fontsize=12, fontweight='bold')
    ax3.set_title('CHSH Convergence', fontsize=14, fontweight='bold')
    ax3.grid(True, alpha=0.3)
    ax3.legend()
    plt.tight_layout()
    plots['convergence'] = fig3

    return plots


def default_pair_counts(max_pairs: int = 100000, points: int = 6) -> List[int]:
    """Log-spaced pair counts for a convergence sweep."""
    max_pairs = max(int(max_pairs), 100)
    return sorted({int(v) for v in np.logspace(2, np.log10(max_pairs), points)})


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'SWEEPABLE_PARAMETERS',
    'run_parameter_sweep',
    'chsh_deviation_bound',
    'trials_to_dataframe',
    'sweep_to_dataframe',
    'create_sweep_plots',
    'default_pair_counts',
]
