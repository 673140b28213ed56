from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from radio.config import DEFAULT_CONFIG, RadioConfig
from radio.errors import require
from radio.matrix import RatingMatrix


@dataclass(frozen=True, kw_only=True)
class ScoredSong:
    song_id: int
    score: float


class RatingPredictor(ABC):
    """Estimates the star rating a user would give a song.

    Subclasses implement ``_estimate`` (an unbounded real estimate); rounding
    and clamping to the configured star range are shared here so every
    predictor obeys the same output contract.
    """

    def __init__(self, config: RadioConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.matrix: RatingMatrix = RatingMatrix.empty()

    def fit(self, matrix: RatingMatrix) -> "RatingPredictor":
        """Bind the predictor to a ledger snapshot."""
        self.matrix = matrix
        return self

    @abstractmethod
    def _estimate(self, user_id: int, song_ids: np.ndarray) -> np.ndarray:
        """Real-valued estimates for ``song_ids``, before clamping."""
        raise NotImplementedError

    def fallback(self) -> float:
        """Estimate used when nothing better is known: global mean, else neutral."""
        if self.matrix.global_mean is None:
            return float(self.config.neutral_rating)
        return self.matrix.global_mean

    def predict_raw_many(self, user_id: int, song_ids) -> np.ndarray:
        require(user_id, "user")
        song_ids = np.asarray(song_ids, dtype=np.int64)
        if song_ids.size == 0:
            return np.array([], dtype=np.float64)
        raw = self._estimate(user_id, song_ids)
        return np.clip(raw, self.config.rating_min, self.config.rating_max)

    def predict_many(self, user_id: int, song_ids) -> np.ndarray:
        """Integer predictions, rounded half up and clamped to the star range."""
        raw = self.predict_raw_many(user_id, song_ids)
        # Σw·r / Σ|w| can land a hair below an exact half; snap before rounding up
        rounded = np.floor(np.round(raw, 9) + 0.5)
        return np.clip(rounded, self.config.rating_min, self.config.rating_max).astype(
            np.int64
        )

    def predict_raw(self, user_id: int, song_id: int) -> float:
        require(song_id, "song")
        return float(self.predict_raw_many(user_id, [song_id])[0])

    def predict(self, user_id: int, song_id: int) -> int:
        require(song_id, "song")
        return int(self.predict_many(user_id, [song_id])[0])
