import numpy as np


def _dcg(gains: np.ndarray) -> float:
    # position i (1-based) is discounted by log2(i + 1)
    return float(np.sum(gains / np.log2(np.arange(2, gains.size + 2))))


def ndcg_at_k(suggested: np.ndarray, held_out: dict[int, float], k: int = 10) -> float:
    """NDCG@K of a suggestion list against a user's held-out star ratings.

    The gain of a suggested song is the rating the user actually gave it in
    the held-out split; a song the user never rated there gains nothing. The
    ideal list plays the held-out songs best-rated first.

    Parameters
    ----------
    suggested : np.ndarray
        Song ids in suggestion order. Only the first *k* count.
    held_out : dict[int, float]
        Song id -> held-out rating (1-5) for one user.
    k : int
        Cut-off position.

    Returns
    -------
    float
        NDCG@K in [0, 1], or 0.0 when nothing was held out.
    """
    if not held_out:
        return 0.0

    top = np.asarray(suggested, dtype=np.int64)[:k]
    gains = np.fromiter(
        (held_out.get(int(song_id), 0.0) for song_id in top),
        dtype=np.float64,
        count=top.size,
    )
    ideal = -np.sort(-np.fromiter(held_out.values(), dtype=np.float64))[:k]

    best = _dcg(ideal)
    return _dcg(gains) / best if best > 0.0 else 0.0
