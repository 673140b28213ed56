import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from tqdm import tqdm

from radio.errors import NoCandidates
from radio.eval.metrics.error import mae, rmse
from radio.eval.metrics.ndcg import ndcg_at_k
from radio.eval.metrics.precision import precision_at_k
from radio.eval.metrics.recall import recall_at_k
from radio.matrix import RatingMatrix
from radio.models.base import RatingPredictor
from radio.models.suggester import Suggester

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Metrics:
    rmse: float
    mae: float
    ndcg: float
    precision: float
    recall: float
    n_users: int
    n_skipped: int


def evaluate(
    predictor: RatingPredictor,
    train_ratings: pd.DataFrame,
    test_ratings: pd.DataFrame,
    song_ids: np.ndarray | None = None,
    k: int = 10,
    threshold: float = 4.0,
    progress: bool = False,
) -> Metrics:
    """Evaluate a rating predictor on held-out ratings.

    Parameters
    ----------
    predictor : RatingPredictor
        Predictor to evaluate; it is re-fitted on ``train_ratings``.
    train_ratings : pd.DataFrame
        Interactions visible to the predictor (UserID, SongID, Rating).
    test_ratings : pd.DataFrame
        Held-out interactions used as ground truth.
    song_ids : np.ndarray | None
        Catalog to rank from. Defaults to every song in train or test.
    k : int
        Cut-off position for the ranking metrics.
    threshold : float
        Binary relevance threshold for Precision@K and Recall@K.
    progress : bool
        Show a tqdm progress bar over test users.

    Returns
    -------
    Metrics
        RMSE/MAE of the unrounded predictions on every held-out rating, and
        NDCG@K, Precision@K, Recall@K of the unrated-song ranking averaged
        over users with at least one relevant held-out song.
    """
    predictor.fit(RatingMatrix.from_frame(train_ratings))
    suggester = Suggester(predictor)

    if song_ids is None:
        song_ids = np.union1d(
            train_ratings["SongID"].to_numpy(dtype=np.int64),
            test_ratings["SongID"].to_numpy(dtype=np.int64),
        )

    predicted, actual = [], []
    ndcg_scores = []
    precision_scores = []
    recall_scores = []
    n_skipped = 0

    groups = test_ratings.groupby("UserID")
    for user_id, group in tqdm(groups, total=groups.ngroups, disable=not progress):
        user_id = int(user_id)
        songs = group["SongID"].to_numpy(dtype=np.int64)
        ratings = group["Rating"].to_numpy(dtype=np.float64)

        predicted.append(predictor.predict_raw_many(user_id, songs))
        actual.append(ratings)

        true_ratings = dict(zip(songs.tolist(), ratings.tolist()))
        try:
            ranked = suggester.recommend(user_id, song_ids, k=k)
        except NoCandidates:
            n_skipped += 1
            continue
        ranked_song_ids = np.array([r.song_id for r in ranked], dtype=np.int64)

        precision = precision_at_k(ranked_song_ids, true_ratings, k=k, threshold=threshold)
        recall = recall_at_k(ranked_song_ids, true_ratings, k=k, threshold=threshold)
        if precision is None or recall is None:
            n_skipped += 1
            continue

        ndcg_scores.append(ndcg_at_k(ranked_song_ids, true_ratings, k=k))
        precision_scores.append(precision)
        recall_scores.append(recall)

    n_users = int(groups.ngroups)
    if n_skipped > 0:
        logger.warning(
            "Skipped %d/%d users with no relevant or no unrated songs",
            n_skipped,
            n_users,
        )

    predicted_all = np.concatenate(predicted) if predicted else np.array([])
    actual_all = np.concatenate(actual) if actual else np.array([])

    return Metrics(
        rmse=rmse(predicted_all, actual_all),
        mae=mae(predicted_all, actual_all),
        ndcg=float(np.mean(ndcg_scores)) if ndcg_scores else 0.0,
        precision=float(np.mean(precision_scores)) if precision_scores else 0.0,
        recall=float(np.mean(recall_scores)) if recall_scores else 0.0,
        n_users=n_users,
        n_skipped=n_skipped,
    )
