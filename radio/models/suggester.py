from __future__ import annotations

import logging
from typing import List

import numpy as np

from radio.config import RadioConfig
from radio.errors import InvalidArgument, NoCandidates, require
from radio.models.base import RatingPredictor, ScoredSong

logger = logging.getLogger(__name__)


def top_k_from_scores(
    song_ids: np.ndarray,
    scores: np.ndarray,
    k: int,
) -> List[ScoredSong]:
    """Return the top-k songs by score (descending), ties by ascending song id."""
    song_ids = np.asarray(song_ids, dtype=np.int64)
    scores = np.asarray(scores, dtype=np.float64)
    if song_ids.size == 0 or k <= 0:
        return []

    # lexsort keys: last one is primary
    order = np.lexsort((song_ids, -scores))[:k]
    return [
        ScoredSong(song_id=int(song_ids[i]), score=float(scores[i]))
        for i in order
    ]


class Suggester:
    """Pick songs a user has not rated yet, best predicted rating first.

    Candidates are scored with the predictor's integer predictions, so equal
    predictions are common; they are ordered by ascending song id, which
    makes every answer stable for a fixed snapshot and catalog.
    """

    def __init__(
        self,
        predictor: RatingPredictor,
        config: RadioConfig | None = None,
    ) -> None:
        self.predictor = predictor
        self.config = config or predictor.config

    def candidates(self, user_id: int, catalog_song_ids) -> np.ndarray:
        """Ascending catalog song ids ``user_id`` has not rated."""
        require(user_id, "user")
        ids = np.unique(np.asarray(catalog_song_ids, dtype=np.int64))
        rated = self.predictor.matrix.rated_song_ids(user_id)
        if rated.size:
            ids = ids[~np.isin(ids, rated)]

        limit = self.config.max_candidates
        if limit is not None and ids.size > limit:
            logger.info(
                "User %s: scoring %d of %d candidates (max_candidates)",
                user_id,
                limit,
                ids.size,
            )
            ids = ids[:limit]
        return ids

    def recommend(self, user_id: int, catalog_song_ids, k: int = 10) -> List[ScoredSong]:
        """Top-k unrated songs for ``user_id`` with their predicted ratings.

        Raises
        ------
        InvalidArgument
            If ``k`` is not positive.
        NoCandidates
            If the user has rated every song in ``catalog_song_ids``.
        """
        if k <= 0:
            raise InvalidArgument(f"k must be positive, got {k}")
        candidates = self.candidates(user_id, catalog_song_ids)
        if candidates.size == 0:
            raise NoCandidates(f"user {user_id} has no unrated songs to suggest")

        predictions = self.predictor.predict_many(user_id, candidates)
        return top_k_from_scores(candidates, predictions, k)

    def suggest(self, user_id: int, catalog_song_ids) -> int:
        """Song id with the highest predicted rating; ties go to the lowest id."""
        return self.recommend(user_id, catalog_song_ids, k=1)[0].song_id
