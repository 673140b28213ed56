import numpy as np
import pytest

from radio.eval.metrics.precision import precision_at_k


def test_all_relevant():
    # arrange
    ranked_song_ids = np.array([1, 2, 3])
    true_ratings = {1: 5.0, 2: 4.0, 3: 4.5}

    # act
    result = precision_at_k(ranked_song_ids, true_ratings, k=3)

    # assert
    assert result == pytest.approx(1.0)


def test_none_relevant():
    # arrange
    ranked_song_ids = np.array([1, 2, 3])
    true_ratings = {1: 2.0, 2: 3.0, 3: 1.0}

    # act
    result = precision_at_k(ranked_song_ids, true_ratings, k=3)

    # assert — no relevant songs → None
    assert result is None


def test_partial_hits():
    # arrange
    ranked_song_ids = np.array([1, 2, 3, 4])
    true_ratings = {1: 5.0, 2: 2.0, 3: 4.0, 4: 1.0}

    # act
    result = precision_at_k(ranked_song_ids, true_ratings, k=4)

    # assert — 2 relevant songs, effective_k=2, top-2 are 1 (hit) and 2 (miss)
    assert result == pytest.approx(0.5)


def test_unknown_songs_are_non_relevant():
    # arrange
    ranked_song_ids = np.array([99, 88, 1])
    true_ratings = {1: 5.0}

    # act
    result = precision_at_k(ranked_song_ids, true_ratings, k=3)

    # assert — 1 relevant song, effective_k=1, top-1 is 99 (miss) → 0.0
    assert result == pytest.approx(0.0)


def test_k_truncates():
    # arrange
    ranked_song_ids = np.array([1, 2, 3, 4])
    true_ratings = {1: 5.0, 2: 2.0, 3: 5.0, 4: 5.0}

    # act
    result = precision_at_k(ranked_song_ids, true_ratings, k=2)

    # assert — k=2: only songs 1 (hit) and 2 (miss)
    assert result == pytest.approx(0.5)


def test_custom_threshold():
    # arrange
    ranked_song_ids = np.array([1, 2, 3])
    true_ratings = {1: 3.0, 2: 3.5, 3: 3.2}

    # act
    result_default = precision_at_k(ranked_song_ids, true_ratings, k=3)
    result_custom = precision_at_k(ranked_song_ids, true_ratings, k=3, threshold=3.0)

    # assert
    assert result_default is None
    assert result_custom == pytest.approx(1.0)


def test_k_larger_than_list():
    # arrange
    ranked_song_ids = np.array([1, 2])
    true_ratings = {1: 5.0, 2: 5.0}

    # act
    result = precision_at_k(ranked_song_ids, true_ratings, k=5)

    # assert — 2 relevant, effective_k=min(5,2)=2, both hit → 1.0
    assert result == pytest.approx(1.0)


def test_boundary_rating_is_relevant():
    # act
    result = precision_at_k(np.array([1]), {1: 4.0}, k=1)

    # assert 4 === 4
    assert result == pytest.approx(1.0)
