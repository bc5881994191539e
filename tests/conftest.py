import matplotlib

matplotlib.use("Agg")

import pytest

from e91_qkd.models import TrialRecord
from e91_qkd.pair_generator import generate_pairs


@pytest.fixture(scope="session")
def history_seed42():
    return generate_pairs(1000, seed=42)


@pytest.fixture(scope="session")
def large_history():
    return generate_pairs(100000, seed=2024)


@pytest.fixture
def hand_trials():
    # (alice_basis, bob_basis, alice_outcome, bob_outcome)
    rows = [
        (1, 1, 1, 0),  # match, disagree
        (0, 1, 0, 0),
        (2, 2, 0, 1),  # match, disagree
        (2, 3, 1, 1),
        (1, 1, 0, 0),  # match, agree
        (2, 2, 1, 0),  # match, disagree
        (0, 2, 1, 0),
    ]
    return tuple(TrialRecord(*r) for r in rows)
