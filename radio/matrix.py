from __future__ import annotations

from typing import Dict, Iterable, Tuple

import numpy as np
import pandas as pd
from scipy import sparse


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


class RatingMatrix:
    """Immutable user x song snapshot of a rating ledger.

    Rows are users and columns are songs, both in ascending id order. A
    stored entry is always a rating in [1, 5], so a structural zero means
    "not rated". The snapshot is never updated in place: the ledger builds a
    new one after each mutation, which lets similarity caches live as long
    as the snapshot does.

    Parameters
    ----------
    user_ids : np.ndarray
        Sorted unique user ids (row labels).
    song_ids : np.ndarray
        Sorted unique song ids (column labels).
    R : sparse.csr_matrix
        Rating matrix of shape (n_users, n_songs).
    version : int
        Ledger version the snapshot was taken at.
    """

    def __init__(
        self,
        user_ids: np.ndarray,
        song_ids: np.ndarray,
        R: sparse.csr_matrix,
        version: int = 0,
    ) -> None:
        self.user_ids = _frozen(np.array(user_ids, dtype=np.int64))
        self.song_ids = _frozen(np.array(song_ids, dtype=np.int64))
        self.version = version

        self._user_to_idx: Dict[int, int] = {
            int(u): i for i, u in enumerate(self.user_ids.tolist())
        }
        self._song_to_idx: Dict[int, int] = {
            int(s): i for i, s in enumerate(self.song_ids.tolist())
        }

        R = sparse.csr_matrix(R, dtype=np.float64)
        R.eliminate_zeros()
        R.sort_indices()
        self.R = R
        self.R_csc = R.tocsc()

        # binary "has rated" indicator
        self.B = R.copy()
        self.B.data = np.ones_like(self.B.data)
        self.B_csc = self.B.tocsc()

        self.n_ratings = int(R.nnz)
        self.global_mean: float | None = (
            float(R.data.sum() / R.nnz) if R.nnz else None
        )

    @classmethod
    def from_triples(
        cls,
        triples: Iterable[Tuple[int, int, int]],
        version: int = 0,
    ) -> "RatingMatrix":
        """Build a snapshot from (user_id, song_id, rating) triples."""
        rows = list(triples)
        if not rows:
            return cls.empty(version=version)

        users, songs, values = (np.asarray(col) for col in zip(*rows))
        users = users.astype(np.int64)
        songs = songs.astype(np.int64)
        user_ids = np.unique(users)
        song_ids = np.unique(songs)

        row = np.searchsorted(user_ids, users)
        col = np.searchsorted(song_ids, songs)
        R = sparse.csr_matrix(
            (values.astype(np.float64), (row, col)),
            shape=(len(user_ids), len(song_ids)),
        )
        return cls(user_ids, song_ids, R, version=version)

    @classmethod
    def from_frame(
        cls,
        ratings: pd.DataFrame,
        user_col: str = "UserID",
        item_col: str = "SongID",
        rating_col: str = "Rating",
    ) -> "RatingMatrix":
        """Build a snapshot from a ratings frame. Duplicate pairs keep the last row."""
        if ratings.empty:
            return cls.empty()
        deduped = ratings.drop_duplicates(subset=[user_col, item_col], keep="last")
        return cls.from_triples(
            zip(
                deduped[user_col].astype(np.int64).to_numpy(),
                deduped[item_col].astype(np.int64).to_numpy(),
                deduped[rating_col].astype(np.int64).to_numpy(),
            )
        )

    @classmethod
    def empty(cls, version: int = 0) -> "RatingMatrix":
        return cls(
            np.array([], dtype=np.int64),
            np.array([], dtype=np.int64),
            sparse.csr_matrix((0, 0), dtype=np.float64),
            version=version,
        )

    @property
    def shape(self) -> Tuple[int, int]:
        return self.R.shape

    def user_index(self, user_id: int) -> int | None:
        return self._user_to_idx.get(user_id)

    def song_index(self, song_id: int) -> int | None:
        return self._song_to_idx.get(song_id)

    def rating(self, user_id: int, song_id: int) -> int | None:
        u = self._user_to_idx.get(user_id)
        s = self._song_to_idx.get(song_id)
        if u is None or s is None:
            return None
        value = self.R[u, s]
        return int(value) if value else None

    def user_ratings(self, user_id: int) -> Dict[int, int]:
        u = self._user_to_idx.get(user_id)
        if u is None:
            return {}
        start, end = self.R.indptr[u], self.R.indptr[u + 1]
        cols = self.R.indices[start:end]
        return {
            int(self.song_ids[c]): int(v)
            for c, v in zip(cols, self.R.data[start:end])
        }

    def song_ratings(self, song_id: int) -> Dict[int, int]:
        s = self._song_to_idx.get(song_id)
        if s is None:
            return {}
        start, end = self.R_csc.indptr[s], self.R_csc.indptr[s + 1]
        rows = self.R_csc.indices[start:end]
        return {
            int(self.user_ids[r]): int(v)
            for r, v in zip(rows, self.R_csc.data[start:end])
        }

    def rated_song_ids(self, user_id: int) -> np.ndarray:
        u = self._user_to_idx.get(user_id)
        if u is None:
            return np.array([], dtype=np.int64)
        return self.song_ids[self.R.indices[self.R.indptr[u]:self.R.indptr[u + 1]]]

    def user_row(self, user_id: int) -> np.ndarray:
        """Dense rating vector of ``user_id`` over all snapshot songs (0 = unrated)."""
        u = self._user_to_idx.get(user_id)
        if u is None:
            return np.zeros(self.R.shape[1], dtype=np.float64)
        return self.R[u].toarray().ravel()

    def co_rated(
        self, user_a: int, user_b: int
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Songs rated by both users with each user's ratings on them.

        Returns
        -------
        tuple[np.ndarray, np.ndarray, np.ndarray]
            Co-rated song ids (ascending), ratings of ``user_a`` and
            ratings of ``user_b`` aligned with those ids.
        """
        row_a = self.user_row(user_a)
        row_b = self.user_row(user_b)
        mask = (row_a > 0) & (row_b > 0)
        return self.song_ids[mask], row_a[mask], row_b[mask]
