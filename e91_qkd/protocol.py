"""
================================================================================
E91 QUANTUM PROTOCOL IMPLEMENTATION
================================================================================

Runs the E91 pipeline end to end:

  1. Generate the trial history (basis choices and correlated outcomes)
  2. Sift the key from matching-basis trials
  3. Run the CHSH Bell test
  4. Estimate the same-basis error rate

Each stage runs to completion before the next reads its output. Stages 3 and
4 only read the history and do not depend on each other. Progress and results
are reported through ProtocolObserver instances; the runner itself performs
no I/O.

Author: E91 QKD Simulation Team
Date: 2025

================================================================================
"""

import logging
import time
from typing import Iterable, Optional

from .bell_test import chsh_test
from .config_validator import validate_and_raise
from .error_estimation import classify_error_rate, estimate_error_rate, per_basis_error_rates
from .models import ProtocolResults, SimulationConfig
from .pair_generator import PairGenerator, make_rng, resolve_seed
from .reporting import (
    STAGE_BELL_TEST,
    STAGE_COMPLETE,
    STAGE_ERROR_RATE,
    STAGE_GENERATE,
    STAGE_SIFT,
    CallbackObserver,
    ProtocolEvent,
    ProtocolObserver,
)
from .security import assess_security
from .sifting import sift_bob_key, sift_key

logger = logging.getLogger(__name__)


# ============================================================================
# E91 PROTOCOL CLASS
# ============================================================================

class E91Protocol:
    """
    E91 Quantum Key Distribution Protocol simulation.

    Both parties share one process and one random source. The seed is
    resolved once at construction, so ``run()`` on the same instance always
    replays the same history.
    """

    def __init__(
        self,
        config: SimulationConfig,
        observers: Iterable[ProtocolObserver] = (),
        generator: Optional[PairGenerator] = None,
    ):
        """
        Initialize E91 protocol simulator.

        Args:
            config: Simulation configuration
            observers: Receivers of progress/result events
            generator: Pair generator (default angle table and basis ranges)

        Raises:
            InvalidArgumentError: If the configuration is invalid
        """
        validate_and_raise(config)

        self.config = config
        self.seed = resolve_seed(config.seed)
        self.generator = generator or PairGenerator()
        self.observers = list(observers)

    def subscribe(self, observer: ProtocolObserver) -> None:
        self.observers.append(observer)

    def _emit(self, observers, stage: str, message: str, progress: float, **payload) -> None:
        event = ProtocolEvent(stage=stage, message=message, progress=progress, payload=payload)
        for observer in observers:
            observer.notify(event)

    def run(self, progress_callback=None) -> ProtocolResults:
        """
        Run the E91 protocol.

        Args:
            progress_callback: Optional callback function(progress, message)

        Returns:
            ProtocolResults with the trial history and every derived metric
        """
        start_time = time.time()
        observers = list(self.observers)
        if progress_callback:
            observers.append(CallbackObserver(progress_callback))

        n = self.config.num_pairs
        logger.debug("Running E91 with num_pairs=%d seed=%d", n, self.seed)

        rng = make_rng(self.seed)
        trials = self.generator.generate(n, rng)
        self._emit(observers, STAGE_GENERATE,
                   f"Generating {n} EPR pairs and performing measurements...", 0.25,
                   num_pairs=n, seed=self.seed)

        sifted_key = sift_key(trials)
        bob_bits = sift_bob_key(trials)
        self._emit(observers, STAGE_SIFT,
                   "Sifting key from measurements with matching bases...", 0.5,
                   matching_count=sifted_key.matching_count,
                   total_pairs=sifted_key.total_pairs,
                   key_length=len(sifted_key))

        bell = chsh_test(trials)
        self._emit(observers, STAGE_BELL_TEST,
                   "Performing Bell inequality test for security verification...", 0.75,
                   bell_test=bell)

        error_rate = estimate_error_rate(trials)
        error_band = classify_error_rate(error_rate)
        self._emit(observers, STAGE_ERROR_RATE,
                   "Estimating error rate on matching-basis measurements...", 0.9,
                   error_rate=error_rate, error_band=error_band)

        results = ProtocolResults(
            config=self.config,
            seed=self.seed,
            trials=trials,
            sifted_key=sifted_key,
            bell_test=bell,
            error_rate=error_rate,
            error_band=error_band,
            security=assess_security(bell, error_rate),
            bob_sifted_bits=bob_bits,
            per_basis_error=per_basis_error_rates(trials),
            execution_time=time.time() - start_time,
        )

        self._emit(observers, STAGE_COMPLETE, "Protocol completed successfully.", 1.0, results=results)
        return results


def run_e91(num_pairs: int, seed: Optional[int] = None, observers: Iterable[ProtocolObserver] = ()) -> ProtocolResults:
    """Convenience wrapper: build a config and run once."""
    return E91Protocol(SimulationConfig(num_pairs=num_pairs, seed=seed), observers=observers).run()


__all__ = ['E91Protocol', 'run_e91']
