import numpy as np
import pandas as pd
import pytest

from radio.eval.eval import evaluate
from radio.models.base import RatingPredictor
from radio.models.baseline import MeanRatingPredictor
from radio.models.predictor import PearsonPredictor


class OraclePredictor(RatingPredictor):
    """Stub predictor that knows the held-out ratings and scores everything else 1."""

    def __init__(self, test_ratings: pd.DataFrame):
        super().__init__()
        self._truth = {
            (int(row.UserID), int(row.SongID)): float(row.Rating)
            for row in test_ratings.itertuples()
        }

    def _estimate(self, user_id, song_ids):
        return np.array([self._truth.get((user_id, int(s)), 1.0) for s in song_ids])


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def train_ratings():
    return pd.DataFrame({
        "UserID": [1, 1, 2, 2, 3, 3],
        "SongID": [10, 20, 30, 40, 10, 50],
        "Rating": [5, 3, 4, 2, 4, 5],
    })


@pytest.fixture
def test_ratings():
    return pd.DataFrame({
        "UserID": [1, 1, 2, 2, 3, 3],
        "SongID": [30, 40, 10, 50, 20, 40],
        "Rating": [5, 4, 5, 1, 3, 5],
    })


# ── Tests ─────────────────────────────────────────────────────────────────────

def test_oracle_is_perfect(train_ratings, test_ratings):
    """Ranking by the true rating puts every relevant song first."""
    # arrange
    model = OraclePredictor(test_ratings)

    # act
    result = evaluate(model, train_ratings, test_ratings, k=2)

    # assert
    assert result.rmse == pytest.approx(0.0)
    assert result.mae == pytest.approx(0.0)
    assert result.precision == pytest.approx(1.0)
    assert result.recall == pytest.approx(1.0)
    assert 0.0 < result.ndcg <= 1.0
    assert result.n_users == 3
    assert result.n_skipped == 0


def test_lenient_threshold_lowers_precision(train_ratings, test_ratings):
    """threshold=1 makes S50 relevant for user 2, but it ties with S20 and loses on id."""
    # arrange
    model = OraclePredictor(test_ratings)

    # act
    result = evaluate(model, train_ratings, test_ratings, k=2, threshold=1.0)

    # assert
    assert result.precision == pytest.approx((1.0 + 0.5 + 1.0) / 3)
    assert result.recall == pytest.approx((1.0 + 0.5 + 1.0) / 3)


def test_users_without_relevant_songs_are_skipped(train_ratings, test_ratings):
    # arrange
    model = OraclePredictor(test_ratings)

    # act
    result = evaluate(model, train_ratings, test_ratings, k=2, threshold=5.5)

    # assert
    assert result.n_skipped == 3
    assert result.precision == 0.0


def test_pearson_and_baseline_stay_in_range(train_ratings, test_ratings):
    for model in (PearsonPredictor(), MeanRatingPredictor()):
        # act
        result = evaluate(model, train_ratings, test_ratings, k=3)

        # assert
        assert 0.0 <= result.rmse <= 4.0
        assert 0.0 <= result.mae <= result.rmse + 1e-12
        assert 0.0 <= result.precision <= 1.0
        assert 0.0 <= result.recall <= 1.0


def test_explicit_catalog_limits_candidates(train_ratings, test_ratings):
    # arrange
    model = OraclePredictor(test_ratings)

    # act — only songs 10 and 20 can be recommended
    result = evaluate(
        model, train_ratings, test_ratings, song_ids=np.array([10, 20]), k=2
    )

    # assert — user 1 rated both in train and is skipped
    assert result.n_skipped == 1
