"""
================================================================================
VISUALIZATION FOR E91 QKD
================================================================================

Results visualization for a single E91 run.

Author: E91 QKD Simulation Team
Date: 2025

================================================================================
"""

import matplotlib.pyplot as plt
import numpy as np

from .config import MeasurementAngles, QuantumConstants, SecurityThresholds
from .models import ProtocolResults, history_arrays
from .quantum_math import mutual_information, theoretical_correlation
from .reporting import describe_setting

CHSH_CLASSICAL_BOUND = QuantumConstants.CHSH_CLASSICAL_BOUND
CHSH_QUANTUM_MAX = QuantumConstants.CHSH_QUANTUM_MAX


# ============================================================================
# RESULTS VISUALIZATION
# ============================================================================

def create_results_plots(results: ProtocolResults):
    """
    Create results visualization.

    Args:
        results: Protocol results

    Returns:
        Matplotlib figure with 6 subplots
    """
    fig = plt.figure(figsize=(18, 10), constrained_layout=False)
    gs = fig.add_gridspec(2, 3, hspace=0.45, wspace=0.35, top=0.92, bottom=0.08, left=0.05, right=0.97)

    # CHSH Parameter
    ax1 = fig.add_subplot(gs[0, 0])
    ax1.bar(
        ['Measured', 'Classical\nBound', 'Quantum\nMax'],
        [results.chsh_S, CHSH_CLASSICAL_BOUND, CHSH_QUANTUM_MAX],
        color=['#3b82f6', '#ef4444', '#22c55e'], alpha=0.8, edgecolor='black', linewidth=1.5,
    )
    ax1.set_ylabel('CHSH S', fontsize=11, fontweight='bold')
    ax1.set_title('Bell Test Result', fontsize=12, fontweight='bold')
    ax1.grid(axis='y', alpha=0.3)
    ax1.axhline(y=CHSH_CLASSICAL_BOUND, color='red', linestyle='--', linewidth=2, label='Classical bound (2.0)')
    ax1.legend(fontsize=9, loc='upper left')

    # CHSH correlators: measured vs model
    ax2 = fig.add_subplot(gs[0, 1])
    stats = results.bell_test.correlations
    x = np.arange(len(stats))
    measured = [s.value for s in stats]
    expected = [theoretical_correlation(s.alice_basis, s.bob_basis) for s in stats]
    ax2.bar(x - 0.2, measured, width=0.4, color='#60a5fa', edgecolor='black', label='Measured')
    ax2.bar(x + 0.2, expected, width=0.4, color='#c4b5fd', edgecolor='black', label='-cos(2Δ)')
    ax2.set_xticks(x)
    ax2.set_xticklabels([describe_setting(s.alice_basis, s.bob_basis) for s in stats], fontsize=8, rotation=15)
    ax2.set_ylim(-1.1, 1.1)
    ax2.axhline(y=0, color='black', linewidth=0.8)
    ax2.set_ylabel('E(a,b)', fontsize=11, fontweight='bold')
    ax2.set_title('CHSH Correlators', fontsize=12, fontweight='bold')
    ax2.grid(axis='y', alpha=0.3)
    ax2.legend(fontsize=9)

    # Error rate with bands
    ax3 = fig.add_subplot(gs[0, 2])
    rate_percent = results.error_rate * 100
    good = SecurityThresholds.ERROR_RATE_GOOD * 100
    caution = SecurityThresholds.ERROR_RATE_CAUTION * 100
    colors = {'good': '#10b981', 'caution': '#f59e0b', 'compromised': '#ef4444'}
    ax3.bar(['Error rate'], [rate_percent], color=colors[results.error_band.value],
            alpha=0.8, edgecolor='black', linewidth=1.5)
    ax3.axhline(y=good, color='#f59e0b', linestyle='--', linewidth=2, label=f'Caution ({good:.0f}%)')
    ax3.axhline(y=caution, color='red', linestyle='--', linewidth=2, label=f'Compromised ({caution:.0f}%)')
    ax3.set_ylim(0, 105)
    ax3.set_ylabel('Same-basis disagreement (%)', fontsize=11, fontweight='bold')
    ax3.set_title('Error Rate', fontsize=12, fontweight='bold')
    ax3.legend(fontsize=9, loc='upper left')
    ax3.grid(axis='y', alpha=0.3)

    # Basis choice counts
    ax4 = fig.add_subplot(gs[1, 0])
    alice_bases = MeasurementAngles.ALICE_BASES
    bob_bases = MeasurementAngles.BOB_BASES
    alice_b, bob_b, _, _ = history_arrays(results.trials)
    counts = np.array([[np.sum((alice_b == a) & (bob_b == b)) for b in bob_bases] for a in alice_bases], dtype=int)
    im = ax4.imshow(counts, cmap='Blues', aspect='auto')
    labels = MeasurementAngles.ANGLE_LABELS
    ax4.set_xticks(range(len(bob_bases)))
    ax4.set_yticks(range(len(alice_bases)))
    ax4.set_xticklabels([f'Bob {labels[b]}' for b in bob_bases])
    ax4.set_yticklabels([f'Alice {labels[a]}' for a in alice_bases])
    ax4.set_title('Basis Choices', fontsize=12, fontweight='bold')
    for i in range(len(alice_bases)):
        for j in range(len(bob_bases)):
            ax4.text(j, i, f'{counts[i, j]:,}', ha='center', va='center', color='black', fontsize=9, fontweight='bold')
    plt.colorbar(im, ax=ax4, label='Trials', fraction=0.046)

    # Per-basis disagreement grid
    ax5 = fig.add_subplot(gs[1, 1])
    grid = np.full((len(alice_bases), len(bob_bases)), np.nan)
    for i, a in enumerate(alice_bases):
        for j, b in enumerate(bob_bases):
            q = results.per_basis_error.get(f'Q_{a}{b}')
            if q is not None:
                grid[i, j] = q
    im5 = ax5.imshow(grid, cmap='RdYlGn_r', vmin=0, vmax=1, aspect='auto')
    ax5.set_xticks(range(len(bob_bases)))
    ax5.set_yticks(range(len(alice_bases)))
    ax5.set_xticklabels([f'Bob {labels[b]}' for b in bob_bases])
    ax5.set_yticklabels([f'Alice {labels[a]}' for a in alice_bases])
    ax5.set_title('Disagreement per Basis Pair', fontsize=12, fontweight='bold')
    for i in range(len(alice_bases)):
        for j in range(len(bob_bases)):
            text = '-' if np.isnan(grid[i, j]) else f'{grid[i, j]:.2f}'
            ax5.text(j, i, text, ha='center', va='center', color='black', fontsize=9, fontweight='bold')
    plt.colorbar(im5, ax=ax5, label='P(a != b)', fraction=0.046)

    # Summary card (ASCII-only text to avoid encoding issues)
    ax6 = fig.add_subplot(gs[1, 2])
    ax6.axis('off')
    key = results.sifted_key
    summary_text = (
        "RUN SUMMARY\n\n"
        f"Pairs: {results.num_pairs:,}\n"
        f"Seed: {results.seed}\n\n"
        f"Matching bases: {key.matching_count:,}\n"
        f"Key length: {len(key):,} bits\n"
        f"Key efficiency: {results.key_efficiency*100:.1f}%\n"
        f"Key preview: {key.preview() or '-'}\n\n"
        f"CHSH S: {results.chsh_S:.4f}\n"
        f"Bell: {'VIOLATED' if results.bell_test.violated else 'NOT violated'}\n"
        f"Error rate: {results.error_rate*100:.2f}% ({results.error_band.value})\n"
        f"I(A:B): {mutual_information(results.error_rate):.3f} bits\n\n"
        f"Runtime: {results.execution_time:.2f}s\n"
    )
    color = 'lightgreen' if results.security.secure else (
        'wheat' if results.security.bell_violated else 'lightcoral')
    ax6.text(
        0.05,
        0.95,
        summary_text,
        transform=ax6.transAxes,
        fontsize=9,
        verticalalignment='top',
        fontfamily='monospace',
        bbox=dict(boxstyle='round', facecolor=color, alpha=0.5),
    )

    plt.suptitle(
        f'E91 QKD Results - {results.config.preset_name}', fontsize=14, fontweight='bold', y=0.98
    )
    return fig


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'create_results_plots',
]
