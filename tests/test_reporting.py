import io
import logging

import pytest

from e91_qkd.models import SimulationConfig
from e91_qkd.protocol import E91Protocol, run_e91
from e91_qkd.reporting import (
    CallbackObserver,
    ConsoleReporter,
    LoggingReporter,
    ProtocolEvent,
    ProtocolObserver,
    describe_setting,
)
from e91_qkd.styles import ConsoleColors


def _console_run(num_pairs, seed, color=False):
    stream = io.StringIO()
    reporter = ConsoleReporter(stream=stream, color=color)
    reporter.print_banner()
    E91Protocol(SimulationConfig(num_pairs=num_pairs, seed=seed), observers=[reporter]).run()
    return stream.getvalue()


def test_console_report_sections():
    out = _console_run(1000, 42)
    assert "E91 Quantum Key Distribution Protocol Simulation" in out
    assert "Matching measurements:" in out
    assert "Sifted key length:" in out
    assert "CHSH correlations:" in out
    assert "CHSH parameter S =" in out
    assert "Quantum bound: 2.828427" in out
    assert "Classical bound: 2.000000" in out
    assert "=== E91 QKD Protocol Results ===" in out
    assert "Key efficiency:" in out
    assert "First 20 bits of shared key:" in out
    assert "=== Security Analysis ===" in out
    assert "\033[" not in out


def test_console_report_uses_results():
    stream = io.StringIO()
    results = run_e91(1000, seed=42, observers=[ConsoleReporter(stream=stream, color=False)])
    out = stream.getvalue()
    assert f"Sifted key length: {len(results.sifted_key)} bits" in out
    assert f"CHSH parameter S = {results.chsh_S:.6f}" in out
    assert results.sifted_key.preview() in out


def test_console_report_empty_run_omits_key_lines():
    out = _console_run(0, 42)
    assert "Key efficiency" not in out
    assert "bits of shared key" not in out
    assert "Estimated error rate: 0.00%" in out
    assert "✗ Bell inequality NOT violated" in out


def test_console_weak_violation_marker():
    out = _console_run(20000, 7)
    assert "✓ Bell inequality VIOLATED" in out
    assert "⚠ Weak quantum correlations" in out


def test_console_colors_enabled():
    out = _console_run(100, 1, color=True)
    assert ConsoleColors.RESET in out


def test_logging_reporter(caplog):
    with caplog.at_level(logging.INFO, logger="e91_qkd.reporting"):
        run_e91(500, seed=1, observers=[LoggingReporter()])
    text = caplog.text
    assert "key_length=" in text
    assert "S=" in text
    assert "band=" in text
    assert "Protocol completed successfully." in text


def test_callback_observer():
    seen = []
    CallbackObserver(lambda p, m: seen.append((p, m))).notify(ProtocolEvent("sift", "hello", 0.5))
    assert seen == [(0.5, "hello")]


def test_describe_setting():
    assert describe_setting(0, 1) == "A=0, B=π/8"
    assert describe_setting(2, 3) == "A=π/4, B=3π/8"


def test_observer_without_notify_cannot_be_created():
    class Silent(ProtocolObserver):
        pass

    with pytest.raises(TypeError):
        Silent()
