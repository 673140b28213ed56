import numpy as np
import pytest

from radio.eval.metrics.recall import recall_at_k


def test_all_relevant_captured():
    # arrange
    ranked_song_ids = np.array([1, 2, 3])
    true_ratings = {1: 5.0, 2: 4.0, 3: 4.5}

    # act
    result = recall_at_k(ranked_song_ids, true_ratings, k=3)

    # assert
    assert result == pytest.approx(1.0)


def test_no_relevant_songs_in_truth():
    """When the user has no songs >= threshold, recall is None."""
    # arrange
    ranked_song_ids = np.array([1, 2, 3])
    true_ratings = {1: 2.0, 2: 3.0, 3: 1.0}

    # act
    result = recall_at_k(ranked_song_ids, true_ratings, k=3)

    # assert
    assert result is None


def test_k_cuts_off_hits():
    # arrange
    ranked_song_ids = np.array([1, 2, 3])
    true_ratings = {1: 5.0, 3: 4.0}

    # act
    result = recall_at_k(ranked_song_ids, true_ratings, k=2)

    # assert — only song 1 is inside the top-2
    assert result == pytest.approx(0.5)


def test_relevant_songs_missing_from_ranking():
    # arrange
    ranked_song_ids = np.array([7, 8])
    true_ratings = {1: 5.0, 2: 5.0, 7: 4.0}

    # act
    result = recall_at_k(ranked_song_ids, true_ratings, k=2)

    # assert
    assert result == pytest.approx(1 / 3)
