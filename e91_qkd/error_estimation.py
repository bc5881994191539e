"""
Error-rate estimation for E91 QKD simulation.

The error rate is the fraction of matching-basis trials where Alice's and
Bob's outcomes disagree. It is a channel-quality / eavesdropping signal only;
the sifted key itself is never corrected from it.
"""

import logging
from typing import Dict, Optional, Sequence

import numpy as np

from .config import MeasurementAngles, SecurityThresholds
from .models import ErrorBand, TrialRecord, history_arrays

logger = logging.getLogger(__name__)


def estimate_error_rate(trials: Sequence[TrialRecord]) -> float:
    """
    Disagreement rate among same-basis trials.

    Args:
        trials: Full trial history

    Returns:
        Rate in [0, 1]; 0.0 when no trial had matching bases
    """
    alice_bases, bob_bases, alice_results, bob_results = history_arrays(trials)
    mask = alice_bases == bob_bases
    total_same_basis = int(np.sum(mask))

    if total_same_basis == 0:
        return 0.0

    mismatches = int(np.sum(alice_results[mask] != bob_results[mask]))
    error_rate = mismatches / total_same_basis
    logger.debug("Error rate %.6f (%d/%d)", error_rate, mismatches, total_same_basis)
    return error_rate


def classify_error_rate(error_rate: float) -> ErrorBand:
    """
    Map an error rate onto its qualitative band.

        < 5%   -> GOOD
        < 15%  -> CAUTION
        ≥ 15%  -> COMPROMISED
    """
    if error_rate < SecurityThresholds.ERROR_RATE_GOOD:
        return ErrorBand.GOOD
    if error_rate < SecurityThresholds.ERROR_RATE_CAUTION:
        return ErrorBand.CAUTION
    return ErrorBand.COMPROMISED


def per_basis_error_rates(trials: Sequence[TrialRecord]) -> Dict[str, Optional[float]]:
    """
    Disagreement rate for every (alice_basis, bob_basis) combination.

    Useful for diagnosing basis-dependent errors. Keys are ``Q_{a}{b}`` with
    the raw angle-table indices; unobserved combinations map to None.

    Args:
        trials: Full trial history

    Returns:
        Dictionary mapping basis pair to disagreement rate
    """
    alice_bases, bob_bases, alice_results, bob_results = history_arrays(trials)

    per_basis = {}
    for ai in MeasurementAngles.ALICE_BASES:
        for bj in MeasurementAngles.BOB_BASES:
            mask = (alice_bases == ai) & (bob_bases == bj)
            n_basis = np.sum(mask)

            if n_basis > 0:
                errors = np.sum(alice_results[mask] != bob_results[mask])
                per_basis[f'Q_{ai}{bj}'] = float(errors / n_basis)
            else:
                per_basis[f'Q_{ai}{bj}'] = None
    return per_basis


__all__ = ['estimate_error_rate', 'classify_error_rate', 'per_basis_error_rates']
