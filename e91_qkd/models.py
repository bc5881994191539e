"""
================================================================================
DATA MODELS FOR E91 QKD
================================================================================

Data structures for E91 Quantum Key Distribution runs.

This module contains:
- SimulationConfig: Run parameters (pair count, seed)
- TrialRecord: One simulated entangled pair (bases and outcomes)
- history_arrays: Column arrays of a trial history for numpy masks
- SiftedKey: Key bits distilled from matching-basis trials
- CorrelationStatistic: Joint-outcome counts for one basis pair
- BellTestResult: The four CHSH correlators and the S statistic
- ErrorBand / SecurityAssessment: Interpretation of a finished run
- ProtocolResults: Everything a run produces, as plain data

Everything derived from a trial history is a frozen, read-only projection of
it. Only SimulationConfig and ProtocolResults are mutable containers.

Author: E91 QKD Simulation Team
Date: 2025

================================================================================
"""

import enum
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from .config import CoreParameters, DisplayDefaults, MeasurementAngles, QuantumConstants
from .quantum_math import compute_correlation, mutual_information


# ============================================================================
# SIMULATION CONFIGURATION
# ============================================================================

@dataclass
class SimulationConfig:
    """Run configuration.

    ``seed=None`` asks the runner to draw a fresh seed from OS entropy; the
    seed actually used is always reported back in ProtocolResults.
    """
    num_pairs: int = CoreParameters.NUM_PAIRS_DEFAULT
    seed: Optional[int] = None
    preset_name: str = "Custom"


# ============================================================================
# TRIAL HISTORY
# ============================================================================

@dataclass(frozen=True)
class TrialRecord:
    """One simulated entangled pair."""
    alice_basis: int
    bob_basis: int
    alice_outcome: int
    bob_outcome: int

    @property
    def bases_match(self) -> bool:
        return self.alice_basis == self.bob_basis

    @property
    def outcomes_agree(self) -> bool:
        return self.alice_outcome == self.bob_outcome


def history_arrays(trials: Sequence[TrialRecord]) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Column view of a trial history for the mask-based statistics.

    Returns:
        Tuple of (alice_bases, bob_bases, alice_results, bob_results) int arrays,
        each of length len(trials)
    """
    data = np.array(
        [(t.alice_basis, t.bob_basis, t.alice_outcome, t.bob_outcome) for t in trials], dtype=int
    ).reshape(-1, 4)
    return data[:, 0], data[:, 1], data[:, 2], data[:, 3]


@dataclass(frozen=True)
class SiftedKey:
    """
    Sifted key bits in original trial order.

    ``matching_count`` and ``total_pairs`` are kept for reporting only; they
    are not part of the key material.
    """
    bits: Tuple[bool, ...]
    matching_count: int
    total_pairs: int

    def __len__(self) -> int:
        return len(self.bits)

    @property
    def efficiency(self) -> float:
        """Fraction of generated pairs that ended up in the key."""
        if self.total_pairs == 0:
            return 0.0
        return len(self.bits) / self.total_pairs

    def to_bitstring(self) -> str:
        return "".join("1" if b else "0" for b in self.bits)

    def preview(self, n_bits: int = DisplayDefaults.KEY_PREVIEW_BITS) -> str:
        return self.to_bitstring()[:n_bits]


# ============================================================================
# BELL TEST
# ============================================================================

@dataclass(frozen=True)
class CorrelationStatistic:
    """Joint-outcome counts for a single (alice_basis, bob_basis) pair."""
    alice_basis: int
    bob_basis: int
    n00: int = 0
    n01: int = 0
    n10: int = 0
    n11: int = 0

    @property
    def total(self) -> int:
        return self.n00 + self.n01 + self.n10 + self.n11

    @property
    def value(self) -> float:
        """E = p00 + p11 - p01 - p10, or 0.0 when nothing was observed."""
        return compute_correlation(self.n00, self.n01, self.n10, self.n11)

    @property
    def label(self) -> str:
        labels = MeasurementAngles.ANGLE_LABELS
        return f"E({labels[self.alice_basis]},{labels[self.bob_basis]})"


@dataclass(frozen=True)
class BellTestResult:
    """
    CHSH test outcome.

    ``correlations`` holds the four statistics in CHSH order:
    E(a0,b0), E(a0,b1), E(a1,b0), E(a1,b1).
    """
    correlations: Tuple[CorrelationStatistic, ...]
    s_value: float
    classical_bound: float = QuantumConstants.CHSH_CLASSICAL_BOUND
    quantum_bound: float = QuantumConstants.CHSH_QUANTUM_MAX

    @property
    def violated(self) -> bool:
        return self.s_value > self.classical_bound

    def correlator(self, alice_basis: int, bob_basis: int) -> float:
        for stat in self.correlations:
            if stat.alice_basis == alice_basis and stat.bob_basis == bob_basis:
                return stat.value
        raise KeyError(f"({alice_basis}, {bob_basis}) is not a CHSH setting")

    def as_dict(self) -> Dict[str, float]:
        return {stat.label: stat.value for stat in self.correlations}


# ============================================================================
# SECURITY INTERPRETATION
# ============================================================================

class ErrorBand(enum.Enum):
    """Qualitative band of the same-basis disagreement rate."""
    GOOD = "good"
    CAUTION = "caution"
    COMPROMISED = "compromised"


@dataclass(frozen=True)
class SecurityAssessment:
    """Verdict derived from the Bell test and the error rate."""
    bell_violated: bool
    strong_correlations: bool
    error_band: ErrorBand
    messages: Tuple[str, ...] = ()

    @property
    def secure(self) -> bool:
        return self.bell_violated and self.strong_correlations


# ============================================================================
# PROTOCOL RESULTS
# ============================================================================

@dataclass
class ProtocolResults:
    """
    Everything a single E91 run produces.

    The trial history is the source of truth; every other field is derived
    from it and can be recomputed at any time.
    """
    config: SimulationConfig
    seed: int
    trials: Tuple[TrialRecord, ...]
    sifted_key: SiftedKey
    bell_test: BellTestResult
    error_rate: float
    error_band: ErrorBand
    security: SecurityAssessment
    bob_sifted_bits: Tuple[bool, ...] = ()
    per_basis_error: Dict[str, Optional[float]] = field(default_factory=dict)
    execution_time: float = 0.0

    @property
    def num_pairs(self) -> int:
        return len(self.trials)

    @property
    def chsh_S(self) -> float:
        return self.bell_test.s_value

    @property
    def key_efficiency(self) -> float:
        return self.sifted_key.efficiency

    def summary(self) -> Dict[str, object]:
        """Flat, JSON-serialisable view of the run."""
        return {
            "preset": self.config.preset_name,
            "num_pairs": self.num_pairs,
            "seed": self.seed,
            "matching_pairs": self.sifted_key.matching_count,
            "sifted_key_length": len(self.sifted_key),
            "key_efficiency": self.key_efficiency,
            "key_preview": self.sifted_key.preview(),
            "correlators": self.bell_test.as_dict(),
            "chsh_S": self.chsh_S,
            "classical_bound": self.bell_test.classical_bound,
            "quantum_bound": self.bell_test.quantum_bound,
            "bell_violated": self.bell_test.violated,
            "error_rate": self.error_rate,
            "error_band": self.error_band.value,
            "mutual_information": mutual_information(self.error_rate),
            "per_basis_error": dict(self.per_basis_error),
            "verdict": list(self.security.messages),
            "execution_time": self.execution_time,
        }


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'SimulationConfig',
    'TrialRecord',
    'history_arrays',
    'SiftedKey',
    'CorrelationStatistic',
    'BellTestResult',
    'ErrorBand',
    'SecurityAssessment',
    'ProtocolResults',
]
