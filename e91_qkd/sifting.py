"""
Key sifting for E91 QKD simulation.

Keeps only the trials where Alice and Bob happened to pick the same basis
index and reads the key bit from Alice's outcome. Bob's outcome is not
compared here; disagreements on matching bases are counted by the error
estimator and never corrected in the key.
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from .models import SiftedKey, TrialRecord, history_arrays

logger = logging.getLogger(__name__)


def matching_mask(alice_bases: np.ndarray, bob_bases: np.ndarray) -> np.ndarray:
    """Boolean mask of trials whose basis indices coincide."""
    return alice_bases == bob_bases


def matching_trials(trials: Sequence[TrialRecord]) -> Tuple[TrialRecord, ...]:
    """Trials with alice_basis == bob_basis, in original order."""
    alice_bases, bob_bases, _, _ = history_arrays(trials)
    return tuple(trials[i] for i in np.flatnonzero(matching_mask(alice_bases, bob_bases)))


def sift_key(trials: Sequence[TrialRecord]) -> SiftedKey:
    """
    Sift the shared key from a trial history.

    Args:
        trials: Full trial history

    Returns:
        SiftedKey with one bit per matching-basis trial (alice_outcome == 1)
    """
    alice_bases, bob_bases, alice_results, _ = history_arrays(trials)
    match_mask = matching_mask(alice_bases, bob_bases)
    bits = tuple((alice_results[match_mask] == 1).tolist())
    logger.debug("Sifted %d bits from %d trials", len(bits), len(trials))
    return SiftedKey(bits=bits, matching_count=int(np.sum(match_mask)), total_pairs=len(trials))


def sift_bob_key(trials: Sequence[TrialRecord]) -> Tuple[bool, ...]:
    """Bob's raw bits over the same positions as sift_key, for comparison only."""
    alice_bases, bob_bases, _, bob_results = history_arrays(trials)
    return tuple((bob_results[matching_mask(alice_bases, bob_bases)] == 1).tolist())


__all__ = ['matching_mask', 'matching_trials', 'sift_key', 'sift_bob_key']
