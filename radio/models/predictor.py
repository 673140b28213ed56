from __future__ import annotations

import logging

import numpy as np

from radio.config import DEFAULT_CONFIG, RadioConfig
from radio.matrix import RatingMatrix
from radio.models.base import RatingPredictor
from radio.models.similarity import SimilarityEngine

logger = logging.getLogger(__name__)


class PearsonPredictor(RatingPredictor):
    """User-based collaborative filtering with Pearson-weighted neighbours.

    For a target user ``u`` and song ``s`` the estimate is

        sum_v(w_uv * r_vs) / sum_v(|w_uv|)

    over every other user ``v`` who rated ``s`` and shares at least one
    co-rated song with ``u``. Users with undefined similarity are left out
    of both sums. When no neighbour carries weight the estimate falls back
    to the global mean rating (or the neutral rating on an empty ledger).
    """

    def __init__(self, config: RadioConfig = DEFAULT_CONFIG) -> None:
        super().__init__(config)
        self.engine = SimilarityEngine(self.matrix)

    def fit(self, matrix: RatingMatrix) -> "PearsonPredictor":
        super().fit(matrix)
        self.engine = SimilarityEngine(matrix)
        return self

    def _estimate(self, user_id: int, song_ids: np.ndarray) -> np.ndarray:
        m = self.matrix
        fallback = self.fallback()
        scores = np.full(song_ids.size, fallback, dtype=np.float64)
        if m.n_ratings == 0:
            return scores

        cols = np.array([m.song_index(int(s)) for s in song_ids], dtype=object)
        known = np.array([c is not None for c in cols], dtype=bool)
        if not known.any():
            return scores

        weights = self.engine.similarities(user_id).weights()
        known_cols = cols[known].astype(np.int64)

        # (n_known,) weighted sums over the raters of each song
        numerator = m.R_csc[:, known_cols].T @ weights
        denominator = m.B_csc[:, known_cols].T @ np.abs(weights)

        contributing = denominator > 0
        estimates = np.full(known_cols.size, fallback, dtype=np.float64)
        estimates[contributing] = numerator[contributing] / denominator[contributing]
        scores[known] = estimates

        logger.debug(
            "User %s: %d/%d songs estimated from neighbours, rest fell back to %.3f",
            user_id,
            int(contributing.sum()),
            song_ids.size,
            fallback,
        )
        return scores
