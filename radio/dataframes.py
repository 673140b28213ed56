from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

import numpy as np
import pandas as pd

from radio.config import DEFAULT_CONFIG, RadioConfig
from radio.ledger import RatingLedger

logger = logging.getLogger(__name__)

RATING_COLUMNS = ["UserID", "SongID", "Rating", "Timestamp"]


def load_ratings(path: str | Path) -> pd.DataFrame:
    """Read a ratings CSV with columns UserID, SongID, Rating[, Timestamp].

    A header row is expected. ``Timestamp`` may be unix seconds or any
    string pandas can parse; it is optional.
    """
    ratings = pd.read_csv(path)
    missing = [c for c in RATING_COLUMNS[:3] if c not in ratings.columns]
    if missing:
        raise ValueError(f"{path}: missing column(s) {', '.join(missing)}")

    ratings = ratings.astype({"UserID": np.int64, "SongID": np.int64, "Rating": np.int64})
    if "Timestamp" in ratings.columns:
        if pd.api.types.is_numeric_dtype(ratings["Timestamp"]):
            ratings["Timestamp"] = pd.to_datetime(ratings["Timestamp"], unit="s")
        else:
            ratings["Timestamp"] = pd.to_datetime(ratings["Timestamp"])
    return ratings


def temporal_split(
    ratings: pd.DataFrame,
    test_fraction: float = 0.2,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Per-user temporal split.

    Each user's ratings are ordered by timestamp (row order when there is no
    Timestamp column); the last ``test_fraction`` of them go to test. Users
    with a single rating stay entirely in train.
    """
    if not 0.0 < test_fraction < 1.0:
        raise ValueError(f"test_fraction must be in (0, 1), got {test_fraction}")

    order_col = "Timestamp" if "Timestamp" in ratings.columns else None

    _train, _test = [], []
    for _, group in ratings.groupby("UserID", sort=True):
        if order_col is not None:
            group = group.sort_values(order_col, kind="stable")
        n = len(group)
        n_test = int(n * test_fraction)
        split = n - n_test
        _train.append(group.iloc[:split])
        _test.append(group.iloc[split:])

    if not _train:
        empty = ratings.iloc[0:0].copy()
        return empty, empty.copy()
    return pd.concat(_train, ignore_index=True), pd.concat(_test, ignore_index=True)


def ledger_from_frame(
    ratings: pd.DataFrame,
    config: RadioConfig = DEFAULT_CONFIG,
) -> RatingLedger:
    """Replay a ratings frame into a fresh ledger. Later rows win on duplicates."""
    ledger = RatingLedger(config)
    for row in ratings[["UserID", "SongID", "Rating"]].itertuples(index=False):
        ledger.set_rating(int(row.UserID), int(row.SongID), int(row.Rating))
    logger.debug("Replayed %d rows into %d ratings", len(ratings), len(ledger))
    return ledger
