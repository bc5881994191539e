"""
================================================================================
REPORTING FOR E91 QKD
================================================================================

Observer interface between the protocol runner and anything that wants to
show progress or results. The runner only emits structured ProtocolEvent
objects; formatting and I/O live entirely in the observers below.

This module contains:
- ProtocolEvent: One structured progress/result event
- ProtocolObserver: Base class receiving events
- CallbackObserver: Adapts a progress_callback(progress, message) function
- LoggingReporter: Writes events through the logging module
- ConsoleReporter: Colored terminal rendering of a run

Author: E91 QKD Simulation Team
Date: 2025

================================================================================
"""

import abc
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, TextIO

from .config import DisplayDefaults, MeasurementAngles
from .styles import ConsoleColors, PlainColors, error_band_color

# ============================================================================
# EVENTS
# ============================================================================

STAGE_GENERATE = "generate"
STAGE_SIFT = "sift"
STAGE_BELL_TEST = "bell_test"
STAGE_ERROR_RATE = "error_rate"
STAGE_COMPLETE = "complete"


@dataclass(frozen=True)
class ProtocolEvent:
    """
    Structured event emitted by E91Protocol after each stage.

    ``payload`` carries the stage output as plain data:
        generate   -> num_pairs, seed
        sift       -> matching_count, total_pairs, key_length
        bell_test  -> bell_test (BellTestResult)
        error_rate -> error_rate, error_band
        complete   -> results (ProtocolResults)
    """
    stage: str
    message: str
    progress: float
    payload: Dict[str, Any] = field(default_factory=dict)


class ProtocolObserver(abc.ABC):
    """Receives ProtocolEvents. Subclasses implement notify()."""

    @abc.abstractmethod
    def notify(self, event: ProtocolEvent) -> None:
        """Handle one event."""


# ============================================================================
# OBSERVERS
# ============================================================================

class CallbackObserver(ProtocolObserver):
    """Forwards events to a progress_callback(progress, message) function."""

    def __init__(self, callback: Callable[[float, str], None]):
        self.callback = callback

    def notify(self, event: ProtocolEvent) -> None:
        self.callback(event.progress, event.message)


class LoggingReporter(ProtocolObserver):
    """Writes a one-line summary of every event to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def notify(self, event: ProtocolEvent) -> None:
        p = event.payload
        if event.stage == STAGE_SIFT:
            self.logger.log(self.level, "%s matching=%d/%d key_length=%d", event.message,
                            p["matching_count"], p["total_pairs"], p["key_length"])
        elif event.stage == STAGE_BELL_TEST:
            bell = p["bell_test"]
            self.logger.log(self.level, "%s S=%.6f violated=%s", event.message, bell.s_value, bell.violated)
        elif event.stage == STAGE_ERROR_RATE:
            self.logger.log(self.level, "%s rate=%.4f band=%s", event.message,
                            p["error_rate"], p["error_band"].value)
        else:
            self.logger.log(self.level, "%s", event.message)


class ConsoleReporter(ProtocolObserver):
    """
    Colored terminal rendering of an E91 run.

    Prints progress as stages finish, then a results block and the security
    analysis once the run is complete.
    """

    def __init__(self, stream: Optional[TextIO] = None, color: bool = True,
                 preview_bits: int = DisplayDefaults.KEY_PREVIEW_BITS):
        self.stream = stream or sys.stdout
        self.c = ConsoleColors if color else PlainColors
        self.preview_bits = preview_bits
        self.precision = DisplayDefaults.FLOAT_PRECISION

    def _write(self, text: str = "") -> None:
        self.stream.write(text + "\n")

    def notify(self, event: ProtocolEvent) -> None:
        handler = {
            STAGE_GENERATE: self._on_generate,
            STAGE_SIFT: self._on_sift,
            STAGE_BELL_TEST: self._on_bell_test,
            STAGE_COMPLETE: self._on_complete,
        }.get(event.stage)
        if handler is not None:
            handler(event)

    def print_banner(self) -> None:
        c = self.c
        self._write(f"{c.BOLD}{c.CYAN}E91 Quantum Key Distribution Protocol Simulation{c.RESET}")
        self._write(f"{c.BOLD}{c.CYAN}{'=' * 48}{c.RESET}")
        self._write()

    def _on_generate(self, event: ProtocolEvent) -> None:
        c = self.c
        self._write(f"{c.CYAN}{event.message}{c.RESET}")
        self._write(f"{c.DIM}Seed: {event.payload['seed']}{c.RESET}")
        self._write()

    def _on_sift(self, event: ProtocolEvent) -> None:
        c = self.c
        p = event.payload
        self._write(f"{c.YELLOW}{event.message}{c.RESET}")
        self._write(f"{c.WHITE}Matching measurements: {c.GREEN}{p['matching_count']}{c.WHITE} "
                    f"out of {c.BLUE}{p['total_pairs']}{c.WHITE} pairs{c.RESET}")
        self._write(f"{c.WHITE}Sifted key length: {c.BOLD}{c.GREEN}{p['key_length']}{c.RESET}"
                    f"{c.WHITE} bits{c.RESET}")
        self._write()

    def _on_bell_test(self, event: ProtocolEvent) -> None:
        c = self.c
        bell = event.payload["bell_test"]
        prec = self.precision
        self._write(f"{c.MAGENTA}{event.message}{c.RESET}")
        self._write(f"{c.DIM}CHSH correlations:{c.RESET}")
        for stat in bell.correlations:
            self._write(f"  {c.WHITE}{stat.label} = {c.CYAN}{stat.value:.{prec}f}{c.RESET}")
        self._write(f"{c.BOLD}{c.WHITE}CHSH parameter S = {c.YELLOW}{bell.s_value:.{prec}f}{c.RESET}")
        self._write(f"{c.DIM}Quantum bound: {c.GREEN}{bell.quantum_bound:.{prec}f}{c.RESET}")
        self._write(f"{c.DIM}Classical bound: {c.RED}{bell.classical_bound:.{prec}f}{c.RESET}")

    def _on_complete(self, event: ProtocolEvent) -> None:
        results = event.payload["results"]
        self.print_results(results)
        self.print_security(results)
        c = self.c
        self._write()
        self._write(f"{c.DIM}{event.message}{c.RESET}")

    def print_results(self, results) -> None:
        c = self.c
        key = results.sifted_key
        self._write()
        self._write(f"{c.BOLD}{c.BLUE}=== E91 QKD Protocol Results ==={c.RESET}")
        self._write(f"{c.WHITE}Total EPR pairs generated: {c.BLUE}{results.num_pairs}{c.RESET}")
        self._write(f"{c.WHITE}Final shared key length: {c.BOLD}{c.GREEN}{len(key)}{c.RESET}{c.WHITE} bits{c.RESET}")

        if len(key) > 0:
            self._write(f"{c.WHITE}Key efficiency: {c.YELLOW}{results.key_efficiency * 100:.1f}%{c.RESET}")

        band_color = error_band_color(results.error_band, self.c)
        self._write(f"{c.WHITE}Estimated error rate: {band_color}{results.error_rate * 100:.2f}%{c.RESET}")

        if len(key) > 0:
            preview = key.preview(self.preview_bits)
            rendered = "".join(
                f"{c.GREEN}1{c.RESET}" if bit == "1" else f"{c.RED}0{c.RESET}" for bit in preview
            )
            self._write(f"{c.WHITE}First {len(preview)} bits of shared key: {c.BOLD}{rendered}")

    def print_security(self, results) -> None:
        c = self.c
        security = results.security
        self._write()
        self._write(f"{c.BOLD}{c.MAGENTA}=== Security Analysis ==={c.RESET}")
        if security.bell_violated:
            self._write(f"{c.BOLD}{c.GREEN}✓ {security.messages[0]}{c.RESET}")
            if security.strong_correlations:
                self._write(f"{c.BOLD}{c.GREEN}✓ {security.messages[1]}{c.RESET}")
            else:
                self._write(f"{c.YELLOW}⚠ {security.messages[1]}{c.RESET}")
        else:
            for line in security.messages:
                self._write(f"{c.BOLD}{c.RED}✗ {line}{c.RESET}")


def describe_setting(alice_basis: int, bob_basis: int) -> str:
    """Human-readable angle pair, e.g. 'A=0, B=π/8'."""
    labels = MeasurementAngles.ANGLE_LABELS
    return f"A={labels[alice_basis]}, B={labels[bob_basis]}"


__all__ = [
    'STAGE_GENERATE',
    'STAGE_SIFT',
    'STAGE_BELL_TEST',
    'STAGE_ERROR_RATE',
    'STAGE_COMPLETE',
    'ProtocolEvent',
    'ProtocolObserver',
    'CallbackObserver',
    'LoggingReporter',
    'ConsoleReporter',
    'describe_setting',
]
