from __future__ import annotations

import numpy as np

from radio.models.base import RatingPredictor


class MeanRatingPredictor(RatingPredictor):
    """Predict the song's mean rating among the other users who rated it.

    Songs nobody else has rated get the global mean. This is the
    non-personalized reference point for offline evaluation.
    """

    def _estimate(self, user_id: int, song_ids: np.ndarray) -> np.ndarray:
        m = self.matrix
        scores = np.full(song_ids.size, self.fallback(), dtype=np.float64)
        if m.n_ratings == 0:
            return scores

        own = m.user_row(user_id)
        for i, song_id in enumerate(song_ids.tolist()):
            s = m.song_index(song_id)
            if s is None:
                continue
            start, end = m.R_csc.indptr[s], m.R_csc.indptr[s + 1]
            total = float(m.R_csc.data[start:end].sum()) - own[s]
            count = (end - start) - int(own[s] > 0)
            if count > 0:
                scores[i] = total / count
        return scores
