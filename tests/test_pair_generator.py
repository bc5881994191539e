import numpy as np
import pytest

from e91_qkd.config import CoreParameters
from e91_qkd.config_validator import InvalidArgumentError
from e91_qkd.models import TrialRecord
from e91_qkd.pair_generator import PairGenerator, generate_pairs, make_rng, resolve_seed


class ScriptedRng:
    """Stands in for numpy's Generator and records the draw order."""

    def __init__(self, integers, randoms):
        self._integers = list(integers)
        self._randoms = list(randoms)
        self.calls = []

    def integers(self, high):
        self.calls.append(("integers", high))
        return self._integers.pop(0)

    def random(self):
        self.calls.append(("random",))
        return self._randoms.pop(0)


def test_same_seed_gives_identical_history():
    gen = PairGenerator()
    a = gen.generate(1000, make_rng(42))
    b = gen.generate(1000, make_rng(42))
    assert a == b


def test_different_seeds_give_different_histories():
    assert generate_pairs(200, seed=1) != generate_pairs(200, seed=2)


def test_basis_ranges(history_seed42):
    assert {t.alice_basis for t in history_seed42} == {0, 1, 2}
    assert {t.bob_basis for t in history_seed42} == {1, 2, 3}
    for t in history_seed42:
        assert t.alice_outcome in (0, 1)
        assert t.bob_outcome in (0, 1)


def test_zero_pairs_gives_empty_history():
    assert PairGenerator().generate(0, make_rng(1)) == ()


@pytest.mark.parametrize("bad", [-1, -100, 2.5, True, "10", None])
def test_invalid_pair_count_raises(bad):
    with pytest.raises(InvalidArgumentError):
        PairGenerator().generate(bad, make_rng(1))


def test_numpy_integer_pair_count_accepted():
    assert len(PairGenerator().generate(np.int64(5), make_rng(1))) == 5


def test_draw_order_per_trial():
    # alice basis idx 0 -> 0, bob basis idx 0 -> 1, alice coin 0.3 -> 0,
    # P(same) for (0, π/8) is ~0.146, so 0.9 flips Bob's outcome
    rng = ScriptedRng(integers=[0, 0], randoms=[0.3, 0.9])
    trials = PairGenerator().generate(1, rng)

    assert trials == (TrialRecord(alice_basis=0, bob_basis=1, alice_outcome=0, bob_outcome=1),)
    assert rng.calls == [("integers", 3), ("integers", 3), ("random",), ("random",)]


def test_conditional_keep_when_draw_below_probability():
    # (0, π/4): E = 0, P(same) = 0.5
    rng = ScriptedRng(integers=[0, 1], randoms=[0.7, 0.2])
    (trial,) = PairGenerator().generate(1, rng)
    assert (trial.alice_basis, trial.bob_basis) == (0, 2)
    assert trial.alice_outcome == 1
    assert trial.bob_outcome == 1


def test_matching_bases_always_anticorrelated(large_history):
    matched = [t for t in large_history if t.bases_match]
    assert matched
    assert all(t.alice_outcome != t.bob_outcome for t in matched)


def test_alice_marginal_is_uniform(large_history):
    mean = np.mean([t.alice_outcome for t in large_history])
    assert abs(mean - 0.5) < 0.01


def test_bob_marginal_is_uniform(large_history):
    mean = np.mean([t.bob_outcome for t in large_history])
    assert abs(mean - 0.5) < 0.01


def test_agreement_frequency_follows_model(large_history):
    gen = PairGenerator()
    for a, b in [(0, 1), (0, 2), (1, 3), (0, 3)]:
        subset = [t for t in large_history if (t.alice_basis, t.bob_basis) == (a, b)]
        same = np.mean([t.outcomes_agree for t in subset])
        expected = (1 + gen.correlation(a, b)) / 2
        assert abs(same - expected) < 0.03


def test_invalid_basis_index_rejected():
    with pytest.raises(ValueError):
        PairGenerator(bob_bases=(1, 2, 4))


def test_resolve_seed():
    assert resolve_seed(7) == 7
    drawn = resolve_seed(None)
    assert isinstance(drawn, int)
    assert drawn >= 0


def test_generate_pairs_reproducible():
    assert generate_pairs(50, seed=3) == generate_pairs(50, seed=3)


def test_fresh_seed_fits_seed_input():
    for _ in range(20):
        assert 0 <= resolve_seed(None) <= CoreParameters.SEED_MAX


def test_fresh_seed_replays():
    seed = resolve_seed(None)
    assert generate_pairs(100, seed) == generate_pairs(100, seed)
