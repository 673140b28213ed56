import numpy as np


def precision_at_k(
    ranked_songs: np.ndarray,
    true_ratings: dict[int, float],
    k: int = 10,
    threshold: float = 4.0,
) -> float | None:
    """Compute Precision@K with binary relevance.

    The cut-off is shrunk to the number of relevant songs when the user has
    fewer than *k* of them, so a perfect ranking always scores 1.0.

    Parameters
    ----------
    ranked_songs : array-like of int
        Song IDs ordered by predicted rating (descending).
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
        Precision@K in [0, 1], or None when the user has no relevant songs.
    """
    n_relevant = sum(1 for r in true_ratings.values() if r >= threshold)
    if n_relevant == 0:
        return None

    effective_k = min(k, n_relevant)
    top = np.asarray(ranked_songs)[:effective_k]
    hits = sum(1 for song in top if true_ratings.get(int(song), 0) >= threshold)
    return hits / effective_k
