"""
================================================================================
STYLING FOR E91 QKD OUTPUT
================================================================================

ANSI colors for the terminal reporter and the CSS theme for the Streamlit
interface.

Author: E91 QKD Simulation Team
Date: 2025

================================================================================
"""

from .models import ErrorBand

# ============================================================================
# TERMINAL COLORS
# ============================================================================

class ConsoleColors:
    """ANSI escape sequences used by ConsoleReporter."""

    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"
    DIM = "\033[2m"


class PlainColors:
    """Same names as ConsoleColors, all empty, for --no-color and pipes."""

    RESET = RED = GREEN = YELLOW = BLUE = MAGENTA = CYAN = WHITE = BOLD = DIM = ""


def error_band_color(band: ErrorBand, palette=ConsoleColors) -> str:
    """Color used to print an error rate in its band."""
    return {
        ErrorBand.GOOD: palette.GREEN,
        ErrorBand.CAUTION: palette.YELLOW,
        ErrorBand.COMPROMISED: palette.RED,
    }[band]


# ============================================================================
# STREAMLIT CSS
# ============================================================================

PROFESSIONAL_CSS = """
<style>
    .main { background: linear-gradient(135deg, #0a0e1a 0%, #1a1f2e 100%); }

    /* Metric cards */
    [data-testid="stMetric"] {
        background: #1a1f2e; border: 1px solid #2d3548; border-radius: 12px; padding: 14px;
    }
    [data-testid="stMetricLabel"] { color: #94a3b8; font-weight: 600; }

    /* Verdict cards */
    .verdict-card { border-radius: 10px; padding: 14px; margin-bottom: 8px; font-weight: 600; }
    .verdict-secure { background: #0f2e1f; color: #86efac; border: 1px solid #22c55e; }
    .verdict-weak { background: #2e260f; color: #fde68a; border: 1px solid #f59e0b; }
    .verdict-insecure { background: #2e0f14; color: #fca5a5; border: 1px solid #ef4444; }

    /* Key preview */
    .key-bits { font-family: monospace; font-size: 1.1rem; letter-spacing: 2px; }
    .key-bit-1 { color: #22c55e; }
    .key-bit-0 { color: #ef4444; }
</style>
"""


__all__ = ['ConsoleColors', 'PlainColors', 'error_band_color', 'PROFESSIONAL_CSS']
