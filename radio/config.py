from __future__ import annotations

import argparse
from dataclasses import dataclass

from radio.errors import InvalidArgument


@dataclass(frozen=True, kw_only=True)
class RadioConfig:
    """Tunable constants of the recommendation core.

    Parameters
    ----------
    rating_min, rating_max : int
        Inclusive bounds of a star rating.
    neutral_rating : int
        Prediction returned when the ledger holds no ratings at all.
    max_candidates : int | None
        Upper bound on the number of candidate songs scored by a single
        ``suggest``/``recommend`` call. Candidates are taken in ascending
        song id order. ``None`` scores every candidate.
    """

    rating_min: int = 1
    rating_max: int = 5
    neutral_rating: int = 3
    max_candidates: int | None = None

    def __post_init__(self) -> None:
        if self.rating_min > self.rating_max:
            raise InvalidArgument(
                f"rating_min ({self.rating_min}) exceeds rating_max ({self.rating_max})"
            )
        if not self.rating_min <= self.neutral_rating <= self.rating_max:
            raise InvalidArgument(
                f"neutral_rating {self.neutral_rating} outside "
                f"[{self.rating_min}, {self.rating_max}]"
            )
        if self.max_candidates is not None and self.max_candidates <= 0:
            raise InvalidArgument("max_candidates must be positive or None")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RadioConfig":
        return cls(max_candidates=getattr(args, "max_candidates", None))


DEFAULT_CONFIG = RadioConfig()
