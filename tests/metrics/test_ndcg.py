import math

import pytest

from radio.eval.metrics.ndcg import ndcg_at_k


def test_perfect_ranking():
    """Songs ranked exactly by descending rating should yield NDCG = 1."""
    # arrange
    ranked = [10, 20, 30]
    true = {10: 5.0, 20: 4.0, 30: 3.0}

    # act
    result = ndcg_at_k(ranked, true, k=3)

    # assert
    assert result == pytest.approx(1.0)


def test_reversed_ranking():
    """Worst-case ordering: lowest-rated song first."""
    # arrange
    ranked = [30, 20, 10]
    true = {10: 5.0, 20: 4.0, 30: 3.0}

    # act
    result = ndcg_at_k(ranked, true, k=3)

    # assert
    assert 0.0 < result < 1.0


def test_single_relevant_song_not_at_top():
    # arrange
    ranked = [2, 1, 3]
    true = {1: 5.0}

    # act
    result = ndcg_at_k(ranked, true, k=3)

    # assert — gain 5 at position 2 over ideal gain 5 at position 1
    assert result == pytest.approx(1 / math.log2(3))


def test_no_ground_truth():
    assert ndcg_at_k([1, 2], {}, k=2) == 0.0


def test_cutoff_ignores_songs_past_k():
    # arrange — the held-out songs only appear after position k
    ranked = [7, 1, 2]
    true = {1: 4.0, 2: 5.0}

    # act
    result = ndcg_at_k(ranked, true, k=1)

    # assert
    assert result == 0.0
