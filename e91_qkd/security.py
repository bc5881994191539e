"""
Security assessment for E91 QKD simulation.

Turns a Bell test result and an error rate into a verdict shared by every
presenter (console, logs, Streamlit, plots).

Author: E91 QKD Simulation Team
Date: 2025
"""

from .config import SecurityThresholds
from .error_estimation import classify_error_rate
from .models import BellTestResult, SecurityAssessment


def assess_security(bell_test: BellTestResult, error_rate: float) -> SecurityAssessment:
    """
    Interpret a finished run.

    Bell test:
        S > classical bound  -> quantum correlations confirmed
        S > 2.5              -> strong correlations, protocol appears secure
        otherwise            -> classical correlations, possible eavesdropping

    Args:
        bell_test: Result of the CHSH test
        error_rate: Same-basis disagreement rate

    Returns:
        SecurityAssessment with human-readable verdict lines
    """
    violated = bell_test.violated
    strong = bell_test.s_value > SecurityThresholds.STRONG_VIOLATION_S
    band = classify_error_rate(error_rate)

    if violated:
        messages = ["Bell inequality VIOLATED - Quantum correlations confirmed"]
        if strong:
            messages.append("Strong quantum correlations - Protocol appears secure")
        else:
            messages.append("Weak quantum correlations - Check for noise or eavesdropping")
    else:
        messages = [
            "Bell inequality NOT violated - Classical correlations detected",
            "Potential eavesdropping or system malfunction",
        ]

    return SecurityAssessment(
        bell_violated=violated,
        strong_correlations=violated and strong,
        error_band=band,
        messages=tuple(messages),
    )


__all__ = ['assess_security']
