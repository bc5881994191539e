"""
================================================================================
E91 QKD Configuration File
================================================================================

Fixed constants shared by every stage of the E91 simulation engine: the
measurement angle table, each party's basis range, the CHSH settings and the
thresholds used when a result is turned into a security verdict.

All values here are process-lifetime constants. Nothing in the engine
re-derives them per call.

Author: E91 QKD Simulation Team
Date: 2025

================================================================================
REFERENCES:
- E91 Original Paper: Ekert, A. K. (1991). Physical Review Letters, 67(6), 661
- CHSH Inequality: Clauser et al. (1969). Physical Review Letters, 23(15), 880
- Tsirelson bound: Tsirelson (1980). Lett. Math. Phys. 4(2), 93
================================================================================
"""

import numpy as np
from typing import Tuple

# ============================================================================
# VERSION AND METADATA
# ============================================================================

VERSION = "1.0.0"
LICENSE = "MIT"

# ============================================================================
# FUNDAMENTAL QUANTUM CONSTANTS
# ============================================================================

class QuantumConstants:
    """Fundamental bounds of the CHSH inequality."""

    # Classical local realistic theories: S ≤ 2
    # Quantum mechanics maximum (Tsirelson bound): S ≤ 2√2 ≈ 2.828
    CHSH_CLASSICAL_BOUND = 2.0
    CHSH_QUANTUM_MAX = float(2.0 * np.sqrt(2))


# ============================================================================
# MEASUREMENT ANGLES
# ============================================================================

class MeasurementAngles:
    """
    Measurement angle table and the basis ranges drawn from it.

    The table is shared by both parties. Alice draws indices from {0, 1, 2},
    Bob from {1, 2, 3}; the ranges only overlap on indices 1 and 2, so those
    are the only bases that can ever match and feed the sifted key.

    Canonical CHSH selection:
    - Alice: a₀ = 0 (index 0), a₁ = π/4 (index 2)
    - Bob:   b₀ = π/8 (index 1), b₁ = π/4 (index 2)
    """

    # 0°, 22.5°, 45°, 67.5°
    ANGLE_TABLE: Tuple[float, ...] = (0.0, np.pi / 8, np.pi / 4, 3 * np.pi / 8)

    ALICE_BASES: Tuple[int, ...] = (0, 1, 2)
    BOB_BASES: Tuple[int, ...] = (1, 2, 3)

    # (alice_basis, bob_basis) in CHSH order:
    # S = |E(a0,b0) - E(a0,b1) + E(a1,b0) + E(a1,b1)|
    CHSH_SETTINGS: Tuple[Tuple[int, int], ...] = ((0, 1), (0, 2), (2, 1), (2, 2))

    # Display labels used by reporters and plots
    ANGLE_LABELS: Tuple[str, ...] = ("0", "π/8", "π/4", "3π/8")


# ============================================================================
# SECURITY THRESHOLDS
# ============================================================================

class SecurityThresholds:
    """
    Thresholds used to interpret a finished run.

    Error-rate bands:
        rate < 5%         -> good
        5% ≤ rate < 15%   -> caution
        rate ≥ 15%        -> compromised / noisy channel

    Bell test:
        S > 2.0           -> Bell inequality violated
        S > 2.5           -> strong quantum correlations
    """

    ERROR_RATE_GOOD = 0.05
    ERROR_RATE_CAUTION = 0.15

    STRONG_VIOLATION_S = 2.5


# ============================================================================
# CORE DEFAULTS
# ============================================================================

class CoreParameters:
    """Core run parameters."""

    # Number of entangled pairs to generate
    NUM_PAIRS_DEFAULT = 1000

    # Below this many pairs the CHSH estimate is too noisy to trust.
    # Must not exceed NUM_PAIRS_DEFAULT.
    NUM_PAIRS_RELIABLE = 1000

    # Upper bound accepted by the interactive front end
    NUM_PAIRS_UI_MAX = 200000

    # Fresh seeds are drawn as 32-bit words so they can be typed back in
    SEED_MAX = 2**32 - 1


class DisplayDefaults:
    """Presentation defaults shared by the CLI and the Streamlit app."""

    KEY_PREVIEW_BITS = 20
    FLOAT_PRECISION = 6


__all__ = [
    'VERSION',
    'QuantumConstants',
    'MeasurementAngles',
    'SecurityThresholds',
    'CoreParameters',
    'DisplayDefaults',
]
