"""
================================================================================
QUANTUM MATHEMATICS FOR E91 QKD
================================================================================

Closed-form quantum statistics used by the E91 simulation engine.

The engine never builds a state vector. Outcome pairs are sampled from the
singlet expectation value E(a,b) = -cos(2(a-b)), which is all the pair
generator, the Bell tester and the plots need.

Author: E91 QKD Simulation Team
Date: 2025

================================================================================
TABLE OF CONTENTS
================================================================================

SECTION 1: Correlation Model
    expected_correlation(a, b)         Singlet expectation E(a,b)
    probability_same(E)                P(Bob == Alice) for a given E
    theoretical_correlation(i, j)      E for two angle-table indices

SECTION 2: Bell Inequalities
    compute_correlation(n00, ...)      Empirical correlation from counts
    compute_chsh_parameter(E00, ...)   CHSH parameter S
    theoretical_chsh_value(settings)   S implied by the correlation model

SECTION 3: Information Theory
    binary_entropy(p)                  Shannon entropy H(p)
    mutual_information(qber)           Alice-Bob information I(A:B)

SECTION 4: Statistics
    chernoff_bound(n, epsilon)         Deviation bound on a mean
    clip_probability(p)                Clip to [0,1]

================================================================================
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from .config import MeasurementAngles

logger = logging.getLogger(__name__)


# ============================================================================
# SECTION 1: CORRELATION MODEL
# ============================================================================


def expected_correlation(angle_a: float, angle_b: float) -> float:
    """
    Quantum correlation of a singlet pair measured at two angles.

    FORMULA:
        E(a,b) = -cos(2(a - b))

    Returns E ∈ [-1, +1]:
        -1 at equal angles (perfect anti-correlation)
         0 at a 45° offset

    Args:
        angle_a: Alice's measurement angle [radians]
        angle_b: Bob's measurement angle [radians]

    Returns:
        Expected correlation E(a,b)

    Reference:
        Ekert (1991), PRL 67(6), 661
    """
    angle_diff = angle_a - angle_b
    return float(-np.cos(2 * angle_diff))


def probability_same(correlation: float) -> float:
    """
    Probability that Bob's outcome equals Alice's.

    With Alice's outcome an unbiased coin, P(same) = (1 + E) / 2 reproduces
    the joint distribution of correlation E while keeping both marginals
    uniform.
    """
    return clip_probability((1.0 + correlation) / 2.0)


def theoretical_correlation(alice_basis: int, bob_basis: int) -> float:
    """E(a,b) for two indices into the shared angle table."""
    table = MeasurementAngles.ANGLE_TABLE
    return expected_correlation(table[alice_basis], table[bob_basis])


# ============================================================================
# SECTION 2: BELL INEQUALITIES
# ============================================================================


def compute_correlation(n00: int, n01: int, n10: int, n11: int) -> float:
    """
    Empirical correlation for one measurement basis pair.

    FORMULA:
        E = p00 + p11 - p01 - p10 = (N_same - N_diff) / N_total

    Args:
        n00, n01, n10, n11: Joint-outcome counts

    Returns:
        Correlation E ∈ [-1, 1]; 0.0 when no outcome was observed

    Reference:
        Clauser et al. (1969), PRL 23(15), 880
    """
    n_total = n00 + n01 + n10 + n11
    if n_total == 0:
        return 0.0

    correlation = ((n00 + n11) - (n01 + n10)) / n_total
    return float(np.clip(correlation, -1.0, 1.0))


def compute_chsh_parameter(E00: float, E01: float, E10: float, E11: float) -> float:
    """
    CHSH Bell inequality parameter.

    FORMULA:
        S = |E(a₀,b₀) - E(a₀,b₁) + E(a₁,b₀) + E(a₁,b₁)|

    BOUNDS:
        Classical (local realism):  S ≤ 2.0
        Quantum (Tsirelson):        S ≤ 2√2 ≈ 2.828

    Args:
        E00, E01, E10, E11: Four correlations

    Returns:
        CHSH parameter S

    Reference:
        Clauser et al. (1969), PRL 23(15), 880
        Tsirelson (1980), Lett. Math. Phys. 4(2), 93
    """
    S = abs(E00 - E01 + E10 + E11)
    return float(S)


def theoretical_chsh_value(
    settings: Sequence[Tuple[int, int]] = MeasurementAngles.CHSH_SETTINGS,
) -> float:
    """
    S implied by E(a,b) = -cos(2(a-b)) at the given CHSH settings.

    For the canonical settings (0,π/8), (0,π/4), (π/4,π/8), (π/4,π/4):
        S = |-1/√2 - 0 - 1/√2 - 1| = 1 + √2 ≈ 2.414

    Args:
        settings: Four (alice_basis, bob_basis) index pairs in CHSH order

    Returns:
        Theoretical CHSH S
    """
    if len(settings) != 4:
        raise ValueError(f"CHSH needs exactly 4 settings, got {len(settings)}")
    E = [theoretical_correlation(a, b) for a, b in settings]
    S = compute_chsh_parameter(*E)
    logger.debug("Theoretical CHSH S for %s: %.6f", tuple(settings), S)
    return S


# ============================================================================
# SECTION 3: INFORMATION THEORY
# ============================================================================


def binary_entropy(p: float) -> float:
    """
    Shannon binary entropy function.

    FORMULA:
        H(p) = -p·log₂(p) - (1-p)·log₂(1-p)

    Args:
        p: Probability [0, 1]

    Returns:
        Entropy in bits [0, 1]

    Reference:
        Shannon (1948), Bell Syst. Tech. J., 27(3), 379-423
    """
    if p <= 0 or p >= 1:
        return 0.0

    h = -p * np.log2(p) - (1 - p) * np.log2(1 - p)
    return float(h)


def mutual_information(qber: float) -> float:
    """
    Mutual information between Alice's and Bob's sifted bits.

    FORMULA:
        I(A:B) = 1 - H(Q)

    A rate of 1.0 (perfect anti-correlation) carries as much information as
    a rate of 0.0.

    Reference:
        Shor & Preskill (2000), PRL 85(2), 441
    """
    return 1.0 - binary_entropy(qber)


# ============================================================================
# SECTION 4: STATISTICS
# ============================================================================


def chernoff_bound(n_samples: int, epsilon: float) -> float:
    """
    Chernoff bound on deviation from expected value.

    FORMULA:
        δ = √[ln(2/ε) / (2n)]

    With probability ≥ (1-ε), the empirical mean of n samples in [0,1] is
    within δ of its expectation.

    Args:
        n_samples: Number of samples
        epsilon: Failure probability

    Returns:
        Maximum deviation δ (capped at 0.5)

    Reference:
        Chernoff (1952), Ann. Math. Stat. 23(4), 493
    """
    if n_samples == 0:
        return 0.5

    delta = np.sqrt(np.log(2.0 / epsilon) / (2.0 * n_samples))
    return float(min(delta, 0.5))


def clip_probability(p: float) -> float:
    """Clip to [0, 1]"""
    return float(np.clip(p, 0.0, 1.0))


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'expected_correlation',
    'probability_same',
    'theoretical_correlation',
    'compute_correlation',
    'compute_chsh_parameter',
    'theoretical_chsh_value',
    'binary_entropy',
    'mutual_information',
    'chernoff_bound',
    'clip_probability',
]
