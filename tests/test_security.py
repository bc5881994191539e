import pytest

from e91_qkd.models import BellTestResult, ErrorBand
from e91_qkd.security import assess_security
from e91_qkd.styles import ConsoleColors, PlainColors, error_band_color


def _bell(s_value):
    return BellTestResult(correlations=(), s_value=s_value)


def test_strong_violation_is_secure():
    assessment = assess_security(_bell(2.7), 0.01)
    assert assessment.bell_violated
    assert assessment.strong_correlations
    assert assessment.secure
    assert assessment.error_band is ErrorBand.GOOD
    assert assessment.messages == (
        "Bell inequality VIOLATED - Quantum correlations confirmed",
        "Strong quantum correlations - Protocol appears secure",
    )


def test_weak_violation():
    assessment = assess_security(_bell(2.414), 1.0)
    assert assessment.bell_violated
    assert not assessment.secure
    assert assessment.error_band is ErrorBand.COMPROMISED
    assert assessment.messages[1] == "Weak quantum correlations - Check for noise or eavesdropping"


@pytest.mark.parametrize("s_value", [0.0, 1.5, 2.0])
def test_no_violation(s_value):
    assessment = assess_security(_bell(s_value), 0.1)
    assert not assessment.bell_violated
    assert not assessment.strong_correlations
    assert assessment.error_band is ErrorBand.CAUTION
    assert assessment.messages == (
        "Bell inequality NOT violated - Classical correlations detected",
        "Potential eavesdropping or system malfunction",
    )


def test_error_band_colors():
    assert error_band_color(ErrorBand.GOOD) == ConsoleColors.GREEN
    assert error_band_color(ErrorBand.COMPROMISED) == ConsoleColors.RED
    assert error_band_color(ErrorBand.CAUTION, PlainColors) == ""
