from e91_qkd.models import history_arrays
from e91_qkd.sifting import matching_mask, matching_trials, sift_bob_key, sift_key


def test_sift_selects_matching_bases_in_order(hand_trials):
    key = sift_key(hand_trials)
    # matching rows: (1,1,1,0), (2,2,0,1), (1,1,0,0), (2,2,1,0)
    assert key.bits == (True, False, False, True)
    assert key.matching_count == 4
    assert key.total_pairs == len(hand_trials)


def test_key_bits_are_never_corrected(hand_trials):
    key = sift_key(hand_trials)
    bob = sift_bob_key(hand_trials)
    assert bob == (False, True, False, False)
    assert key.bits != bob


def test_key_length_matches_matching_count(history_seed42):
    key = sift_key(history_seed42)
    n_match = sum(1 for t in history_seed42 if t.alice_basis == t.bob_basis)
    assert len(key) == n_match == key.matching_count
    assert 0 <= len(key) <= len(history_seed42)


def test_only_bases_one_and_two_can_match(history_seed42):
    assert {t.alice_basis for t in matching_trials(history_seed42)} <= {1, 2}


def test_sift_is_repeatable(history_seed42):
    assert sift_key(history_seed42) == sift_key(history_seed42)


def test_empty_history():
    key = sift_key(())
    assert key.bits == ()
    assert len(key) == 0
    assert key.efficiency == 0.0
    assert key.preview() == ""
    assert sift_bob_key(()) == ()


def test_efficiency_and_preview(hand_trials):
    key = sift_key(hand_trials)
    assert key.efficiency == 4 / 7
    assert key.to_bitstring() == "1001"
    assert key.preview(2) == "10"


def test_efficiency_near_two_ninths(large_history):
    # P(match) = P(1,1) + P(2,2) = 2/9
    assert abs(sift_key(large_history).efficiency - 2 / 9) < 0.01


def test_history_arrays_columns(hand_trials):
    alice_bases, bob_bases, alice_results, bob_results = history_arrays(hand_trials)
    assert alice_bases.tolist() == [1, 0, 2, 2, 1, 2, 0]
    assert bob_bases.tolist() == [1, 1, 2, 3, 1, 2, 2]
    assert alice_results.tolist() == [1, 0, 0, 1, 0, 1, 1]
    assert bob_results.tolist() == [0, 0, 1, 1, 0, 0, 0]
    assert matching_mask(alice_bases, bob_bases).tolist() == [True, False, True, False, True, True, False]


def test_history_arrays_empty():
    arrays = history_arrays(())
    assert all(a.shape == (0,) for a in arrays)


def test_mask_sifting_agrees_with_records(history_seed42):
    expected = tuple(t.alice_outcome == 1 for t in history_seed42 if t.bases_match)
    key = sift_key(history_seed42)
    assert key.bits == expected
    assert all(type(b) is bool for b in key.bits)
    assert matching_trials(history_seed42) == tuple(t for t in history_seed42 if t.bases_match)
