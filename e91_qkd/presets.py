"""
================================================================================
CONFIGURATION PRESETS FOR E91 QKD
================================================================================

Named run configurations shared by the CLI and the Streamlit interface.

Author: E91 QKD Simulation Team
Date: 2025

================================================================================
"""

import copy
from typing import Dict, List, Optional

from .config import CoreParameters
from .models import SimulationConfig


# ============================================================================
# PRESET TABLE
# ============================================================================

# name -> (num_pairs, seed); seed None means a fresh entropy-drawn seed
PRESETS: Dict[str, Dict[str, Optional[int]]] = {
    "Quick Demo": {"num_pairs": CoreParameters.NUM_PAIRS_DEFAULT, "seed": None},
    "Reproducible Seed 42": {"num_pairs": 1000, "seed": 42},
    "High Statistics": {"num_pairs": 100000, "seed": 42},
    "Empty Run": {"num_pairs": 0, "seed": 42},
}


def list_presets() -> List[str]:
    """Preset names in display order, with "Custom" last."""
    return list(PRESETS) + ["Custom"]


def get_preset_config(preset_name: str, base_config: Optional[SimulationConfig] = None) -> SimulationConfig:
    """
    Load a preset configuration.

    "Custom" returns a copy of base_config untouched apart from its name.

    Args:
        preset_name: Name of the preset to load
        base_config: Starting configuration (not modified)

    Returns:
        New SimulationConfig

    Raises:
        ValueError: If the preset name is unknown
    """
    config = copy.deepcopy(base_config) if base_config is not None else SimulationConfig()

    if preset_name == "Custom":
        config.preset_name = "Custom"
        return config

    if preset_name not in PRESETS:
        raise ValueError(f"Unknown preset '{preset_name}'. Choose one of {list_presets()}")

    values = PRESETS[preset_name]
    config.num_pairs = values["num_pairs"]
    config.seed = values["seed"]
    config.preset_name = preset_name
    return config


__all__ = ['PRESETS', 'list_presets', 'get_preset_config']
