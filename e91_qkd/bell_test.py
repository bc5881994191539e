"""
CHSH Bell test for E91 QKD simulation.

Estimates the four CHSH correlators from the trial history and combines them
into the S statistic:

    S = |E(a0,b0) - E(a0,b1) + E(a1,b0) + E(a1,b1)|

with the canonical settings a0 = 0, a1 = π/4, b0 = π/8, b1 = π/4.

All functions are read-only over the history and may be called any number of
times with identical results.
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from .config import MeasurementAngles, QuantumConstants
from .models import BellTestResult, CorrelationStatistic, TrialRecord, history_arrays
from .quantum_math import compute_chsh_parameter

logger = logging.getLogger(__name__)


def _count_joint_outcomes(arrays, alice_basis: int, bob_basis: int) -> CorrelationStatistic:
    alice_bases, bob_bases, alice_results, bob_results = arrays
    mask = (alice_bases == alice_basis) & (bob_bases == bob_basis)
    a_res = alice_results[mask]
    b_res = bob_results[mask]

    return CorrelationStatistic(
        alice_basis=alice_basis,
        bob_basis=bob_basis,
        n00=int(np.sum((a_res == 0) & (b_res == 0))),
        n01=int(np.sum((a_res == 0) & (b_res == 1))),
        n10=int(np.sum((a_res == 1) & (b_res == 0))),
        n11=int(np.sum((a_res == 1) & (b_res == 1))),
    )


def calculate_correlation(trials: Sequence[TrialRecord], alice_basis: int, bob_basis: int) -> CorrelationStatistic:
    """
    Count joint outcomes for one exact basis pair.

    Args:
        trials: Full trial history
        alice_basis: Alice's angle-table index
        bob_basis: Bob's angle-table index

    Returns:
        CorrelationStatistic; its value is 0.0 if no trial used this pair
    """
    return _count_joint_outcomes(history_arrays(trials), alice_basis, bob_basis)


def chsh_test(
    trials: Sequence[TrialRecord],
    settings: Sequence[Tuple[int, int]] = MeasurementAngles.CHSH_SETTINGS,
) -> BellTestResult:
    """
    Run the CHSH test over a trial history.

    Args:
        trials: Full trial history
        settings: Four (alice_basis, bob_basis) pairs in CHSH order

    Returns:
        BellTestResult with the four correlators, S and both reference bounds
    """
    if len(settings) != 4:
        raise ValueError(f"CHSH needs exactly 4 settings, got {len(settings)}")

    arrays = history_arrays(trials)
    correlations = tuple(_count_joint_outcomes(arrays, a, b) for a, b in settings)
    S = compute_chsh_parameter(*(c.value for c in correlations))

    for c in correlations:
        logger.debug("%s = %.6f over %d trials", c.label, c.value, c.total)
    logger.debug("CHSH S = %.6f", S)

    return BellTestResult(
        correlations=correlations,
        s_value=S,
        classical_bound=QuantumConstants.CHSH_CLASSICAL_BOUND,
        quantum_bound=QuantumConstants.CHSH_QUANTUM_MAX,
    )


__all__ = ['calculate_correlation', 'chsh_test']
