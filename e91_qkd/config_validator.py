"""
Configuration validator for E91 QKD simulation.

Validates SimulationConfig before any random draw is made, so an invalid run
fails up front instead of producing a partial trial history.

Author: E91 QKD Simulation Team
Date: 2025
"""

import numbers
import warnings
from typing import List, Tuple

from .config import CoreParameters
from .models import SimulationConfig


class InvalidArgumentError(ValueError):
    """Raised for run parameters the engine refuses to clamp or coerce."""


def check_num_pairs(num_pairs) -> None:
    """
    Raise InvalidArgumentError unless num_pairs is a non-negative integer.

    Booleans are rejected even though they are ints in Python.
    """
    if isinstance(num_pairs, bool) or not isinstance(num_pairs, numbers.Integral):
        raise InvalidArgumentError(
            f"num_pairs must be a non-negative integer, got {num_pairs!r}"
        )
    if num_pairs < 0:
        raise InvalidArgumentError(f"num_pairs must be >= 0, got {num_pairs}")


def validate_config(config: SimulationConfig) -> Tuple[List[str], List[str]]:
    """
    Validate SimulationConfig for consistency.

    Args:
        config: SimulationConfig to validate

    Returns:
        Tuple of (errors, warnings)
        - errors: Fatal issues that prevent running
        - warnings: Non-fatal issues user should know about
    """
    errors = []
    warns = []

    try:
        check_num_pairs(config.num_pairs)
    except InvalidArgumentError as e:
        errors.append(str(e))

    if config.seed is not None:
        if isinstance(config.seed, bool) or not isinstance(config.seed, numbers.Integral):
            errors.append(f"seed must be an integer or None, got {config.seed!r}")
        elif config.seed < 0:
            errors.append(f"seed must be >= 0, got {config.seed}")

    if not errors:
        if config.num_pairs == 0:
            warns.append(
                "num_pairs=0: the run produces an empty history, an empty key, "
                "S=0.0 and an error rate of 0.0."
            )
        elif config.num_pairs < CoreParameters.NUM_PAIRS_RELIABLE:
            warns.append(
                f"Low number of pairs ({config.num_pairs}). "
                f"CHSH estimates below {CoreParameters.NUM_PAIRS_RELIABLE} pairs may be unreliable."
            )

    return errors, warns


def validate_and_raise(config: SimulationConfig):
    """
    Validate config and raise InvalidArgumentError if invalid.

    Warnings are issued through the warnings module; only errors raise.

    Args:
        config: SimulationConfig to validate

    Raises:
        InvalidArgumentError: If config has fatal errors
    """
    errors, warns = validate_config(config)

    if warns:
        for w in warns:
            warnings.warn(w, UserWarning)

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise InvalidArgumentError(error_msg)


__all__ = ['InvalidArgumentError', 'check_num_pairs', 'validate_config', 'validate_and_raise']
