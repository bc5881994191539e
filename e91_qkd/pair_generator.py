"""
Entangled pair generator for E91 QKD simulation.

Samples basis choices and correlated outcome pairs without simulating a
quantum state. Each trial consumes the random generator in a fixed order:

    1. Alice's basis
    2. Bob's basis
    3. Alice's outcome (fair coin)
    4. Bob's outcome (kept or flipped relative to Alice's)

Reordering these draws changes the history produced for a given seed.

Author: E91 QKD Simulation Team
Date: 2025
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from .config import MeasurementAngles
from .config_validator import check_num_pairs
from .models import TrialRecord
from .quantum_math import expected_correlation, probability_same

logger = logging.getLogger(__name__)


def resolve_seed(seed: Optional[int] = None) -> int:
    """Return seed unchanged, or draw a fresh 32-bit one from OS entropy."""
    if seed is not None:
        return int(seed)
    return int(np.random.SeedSequence().generate_state(1)[0])


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Build the single random source shared by both parties."""
    return np.random.default_rng(resolve_seed(seed))


class PairGenerator:
    """
    Generates the trial history of an E91 run.

    Uses the closed-form singlet correlation E(a,b) = -cos(2(a-b)) to decide
    whether Bob's outcome agrees with Alice's.
    """

    def __init__(
        self,
        angle_table: Sequence[float] = MeasurementAngles.ANGLE_TABLE,
        alice_bases: Sequence[int] = MeasurementAngles.ALICE_BASES,
        bob_bases: Sequence[int] = MeasurementAngles.BOB_BASES,
    ):
        """
        Initialize the generator.

        Args:
            angle_table: Measurement angles (radians) shared by both parties
            alice_bases: Angle-table indices Alice draws from, uniformly
            bob_bases: Angle-table indices Bob draws from, uniformly
        """
        self.angle_table = tuple(float(a) for a in angle_table)
        self.alice_bases = tuple(alice_bases)
        self.bob_bases = tuple(bob_bases)

        for idx in self.alice_bases + self.bob_bases:
            if not 0 <= idx < len(self.angle_table):
                raise ValueError(f"Basis index {idx} outside angle table of size {len(self.angle_table)}")

    def correlation(self, alice_basis: int, bob_basis: int) -> float:
        """Correlation strength for a pair of basis indices."""
        return expected_correlation(self.angle_table[alice_basis], self.angle_table[bob_basis])

    def measure_bell_pair(self, rng: np.random.Generator, alice_basis: int, bob_basis: int) -> Tuple[int, int]:
        """
        Sample one correlated outcome pair.

        Alice's outcome is an unbiased coin. Bob's outcome equals Alice's with
        probability (1 + E) / 2 and is flipped otherwise.

        Returns:
            (alice_outcome, bob_outcome)
        """
        prob_same = probability_same(self.correlation(alice_basis, bob_basis))

        alice_outcome = 0 if rng.random() < 0.5 else 1
        if rng.random() < prob_same:
            bob_outcome = alice_outcome
        else:
            bob_outcome = 1 - alice_outcome
        return alice_outcome, bob_outcome

    def generate(self, num_pairs: int, rng: np.random.Generator) -> Tuple[TrialRecord, ...]:
        """
        Generate the full trial history.

        Args:
            num_pairs: Number of entangled pairs (0 gives an empty history)
            rng: Random source, consumed sequentially

        Returns:
            Immutable tuple of TrialRecord in generation order

        Raises:
            InvalidArgumentError: If num_pairs is negative or not an integer
        """
        check_num_pairs(num_pairs)

        trials = []
        for _ in range(num_pairs):
            alice_basis = self.alice_bases[int(rng.integers(len(self.alice_bases)))]
            bob_basis = self.bob_bases[int(rng.integers(len(self.bob_bases)))]
            alice_outcome, bob_outcome = self.measure_bell_pair(rng, alice_basis, bob_basis)
            trials.append(TrialRecord(alice_basis, bob_basis, alice_outcome, bob_outcome))

        logger.debug("Generated %d trials", len(trials))
        return tuple(trials)


def generate_pairs(num_pairs: int, seed: Optional[int] = None) -> Tuple[TrialRecord, ...]:
    """Generate a history with the default angle table and basis ranges."""
    return PairGenerator().generate(num_pairs, make_rng(seed))


__all__ = ['PairGenerator', 'generate_pairs', 'make_rng', 'resolve_seed']
