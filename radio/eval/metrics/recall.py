import numpy as np


def recall_at_k(
    ranked_songs: np.ndarray,
    true_ratings: dict[int, float],
    k: int = 10,
    threshold: float = 4.0,
) -> float | None:
    """Compute Recall@K with binary relevance.

    Parameters
    ----------
    ranked_songs : array-like of int
        Song IDs ordered by predicted rating (descending). Only the first
        *k* entries are used.
    true_ratings : dict[int, float]
        Mapping from song ID to its held-out rating. Songs absent from
        this dict are non-relevant.
    k : int
        Cut-off position.
    threshold : float
        Minimum rating to count as relevant.

    Returns
    -------
    float | None
        Recall@K in [0, 1], or None when the user has no relevant songs.
    """
    total_relevant = sum(1 for r in true_ratings.values() if r >= threshold)

    if total_relevant == 0:
        return None

    top = np.asarray(ranked_songs)[:k]
    hits = sum(1 for song in top if true_ratings.get(int(song), 0) >= threshold)
    return hits / total_relevant
