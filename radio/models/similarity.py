from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Union

import numpy as np
from scipy import sparse

from radio.errors import InvalidArgument, require
from radio.matrix import RatingMatrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Defined:
    """Similarity backed by at least one co-rated song."""

    value: float

    @property
    def is_defined(self) -> bool:
        return True


@dataclass(frozen=True)
class Undefined:
    """No co-rated songs: there is nothing to compare."""

    @property
    def is_defined(self) -> bool:
        return False


UNDEFINED = Undefined()

Similarity = Union[Defined, Undefined]


def _pearson_terms(
    n: np.ndarray,
    sum_a: np.ndarray,
    sum_b: np.ndarray,
    sum_ab: np.ndarray,
    sum_aa: np.ndarray,
    sum_bb: np.ndarray,
) -> np.ndarray:
    """Pearson correlation from co-rated sums, 0 where a variance vanishes.

    Each user is centered on their mean over the co-rated songs only. The
    sums are scaled by ``n`` instead of dividing by it, so for integer
    ratings every numerator is computed exactly and zero variance is an
    exact zero rather than rounding noise.
    """
    cov = n * sum_ab - sum_a * sum_b
    var_a = n * sum_aa - sum_a * sum_a
    var_b = n * sum_bb - sum_b * sum_b

    out = np.zeros_like(cov, dtype=np.float64)
    ok = (var_a > 0) & (var_b > 0)
    out[ok] = cov[ok] / np.sqrt(var_a[ok] * var_b[ok])
    return np.clip(out, -1.0, 1.0)


def pearson(ratings_a: np.ndarray, ratings_b: np.ndarray) -> Similarity:
    """Pearson correlation of two aligned rating vectors over a co-rated set.

    Parameters
    ----------
    ratings_a, ratings_b : np.ndarray
        Ratings of two users on the same songs, in the same order.

    Returns
    -------
    Similarity
        ``UNDEFINED`` for an empty co-rated set, ``Defined(0.0)`` when either
        vector has zero variance, otherwise ``Defined(r)`` with r in [-1, 1].
    """
    a = np.asarray(ratings_a, dtype=np.float64)
    b = np.asarray(ratings_b, dtype=np.float64)
    if a.shape != b.shape:
        raise InvalidArgument(f"rating vectors differ in shape: {a.shape} vs {b.shape}")
    if a.size == 0:
        return UNDEFINED

    value = _pearson_terms(
        n=np.array([float(a.size)]),
        sum_a=np.array([a.sum()]),
        sum_b=np.array([b.sum()]),
        sum_ab=np.array([(a * b).sum()]),
        sum_aa=np.array([(a * a).sum()]),
        sum_bb=np.array([(b * b).sum()]),
    )
    return Defined(float(value[0]))


@dataclass(frozen=True, kw_only=True, eq=False)
class SimilarityRow:
    """Similarities of one user against every user of a snapshot.

    ``values[i]`` is meaningful only where ``defined[i]`` is True; the
    target user itself is never defined.
    """

    user_id: int
    user_ids: np.ndarray
    values: np.ndarray
    defined: np.ndarray

    def weights(self) -> np.ndarray:
        """Similarity values with undefined entries zeroed, for weighted sums."""
        return np.where(self.defined, self.values, 0.0)

    def get(self, other: int) -> Similarity:
        idx = np.searchsorted(self.user_ids, other)
        if idx >= self.user_ids.size or self.user_ids[idx] != other:
            return UNDEFINED
        if not self.defined[idx]:
            return UNDEFINED
        return Defined(float(self.values[idx]))


class SimilarityEngine:
    """User-user Pearson similarity over a fixed ``RatingMatrix`` snapshot.

    Rows are computed lazily and cached; the cache is valid for the
    lifetime of the snapshot because snapshots never change.
    """

    def __init__(self, matrix: RatingMatrix) -> None:
        self.matrix = matrix
        self._R_sq: sparse.csr_matrix = matrix.R.multiply(matrix.R).tocsr()
        self._rows: Dict[int, SimilarityRow] = {}

    def similarity(self, user_a: int, user_b: int) -> Similarity:
        """Pearson similarity of two distinct users over their co-rated songs."""
        require(user_a, "user_a")
        require(user_b, "user_b")
        if user_a == user_b:
            raise InvalidArgument("similarity requires two distinct users")

        _, ratings_a, ratings_b = self.matrix.co_rated(user_a, user_b)
        return pearson(ratings_a, ratings_b)

    def similarities(self, user_id: int) -> SimilarityRow:
        """Similarity of ``user_id`` against every user in the snapshot."""
        require(user_id, "user")
        row = self._rows.get(user_id)
        if row is None:
            row = self._compute_row(user_id)
            self._rows[user_id] = row
        return row

    def _compute_row(self, user_id: int) -> SimilarityRow:
        m = self.matrix
        n_users = m.shape[0]
        u = m.user_index(user_id)
        if u is None:
            return SimilarityRow(
                user_id=user_id,
                user_ids=m.user_ids,
                values=np.zeros(n_users, dtype=np.float64),
                defined=np.zeros(n_users, dtype=bool),
            )

        r_u = m.user_row(user_id)
        b_u = (r_u > 0).astype(np.float64)

        # every sum runs over the co-rated songs of (u, v) for each row v
        n = m.B @ b_u
        sum_u = m.B @ r_u
        sum_v = m.R @ b_u
        sum_uv = m.R @ r_u
        sum_uu = m.B @ (r_u * r_u)
        sum_vv = self._R_sq @ b_u

        defined = n > 0
        defined[u] = False

        values = _pearson_terms(n, sum_u, sum_v, sum_uv, sum_uu, sum_vv)
        values[~defined] = 0.0

        logger.debug(
            "Similarity row for user %s: %d/%d neighbours defined",
            user_id,
            int(defined.sum()),
            n_users - 1,
        )
        return SimilarityRow(
            user_id=user_id,
            user_ids=m.user_ids,
            values=values,
            defined=defined,
        )
