from __future__ import annotations

import logging
import numbers
from typing import Dict

from radio.config import DEFAULT_CONFIG, RadioConfig
from radio.errors import InvalidArgument, NoRatingOnRecord, require
from radio.matrix import RatingMatrix

logger = logging.getLogger(__name__)


class RatingLedger:
    """Sparse store of (user, song) -> star rating.

    Ratings are indexed both by user and by song. Every mutation bumps
    ``version``; ``snapshot()`` returns an immutable ``RatingMatrix`` that is
    reused until the next mutation.
    """

    def __init__(self, config: RadioConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._by_user: Dict[int, Dict[int, int]] = {}
        self._by_song: Dict[int, Dict[int, int]] = {}
        self._total = 0
        self._count = 0
        self.version = 0
        self._snapshot: RatingMatrix | None = None

    def __len__(self) -> int:
        return self._count

    def set_rating(self, user_id: int, song_id: int, value: int) -> None:
        """Record ``value`` stars, replacing any earlier rating of the pair."""
        require(user_id, "user")
        require(song_id, "song")
        value = self._validate(value)

        previous = self._by_user.get(user_id, {}).get(song_id)
        if previous is not None:
            self._total -= previous
            self._count -= 1

        self._by_user.setdefault(user_id, {})[song_id] = value
        self._by_song.setdefault(song_id, {})[user_id] = value
        self._total += value
        self._count += 1
        self._touch()
        logger.debug("User %s rated song %s: %d", user_id, song_id, value)

    def clear_rating(self, user_id: int, song_id: int) -> None:
        """Remove the pair's rating entirely, as if it was never made."""
        require(user_id, "user")
        require(song_id, "song")
        user_ratings = self._by_user.get(user_id)
        if user_ratings is None or song_id not in user_ratings:
            raise NoRatingOnRecord(
                f"user {user_id} has no rating on record for song {song_id}"
            )
        value = user_ratings.pop(song_id)
        if not user_ratings:
            del self._by_user[user_id]

        song_ratings = self._by_song[song_id]
        del song_ratings[user_id]
        if not song_ratings:
            del self._by_song[song_id]

        self._total -= value
        self._count -= 1
        self._touch()
        logger.debug("Cleared rating of user %s on song %s", user_id, song_id)

    def remove_song(self, song_id: int) -> int:
        """Drop every rating of ``song_id``. Returns how many were removed."""
        song_ratings = self._by_song.pop(song_id, {})
        for user_id, value in song_ratings.items():
            user_ratings = self._by_user[user_id]
            del user_ratings[song_id]
            if not user_ratings:
                del self._by_user[user_id]
            self._total -= value
            self._count -= 1
        if song_ratings:
            self._touch()
        return len(song_ratings)

    def get_rating(self, user_id: int, song_id: int) -> int | None:
        return self._by_user.get(user_id, {}).get(song_id)

    def ratings_for_user(self, user_id: int) -> Dict[int, int]:
        return dict(self._by_user.get(user_id, {}))

    def ratings_for_song(self, song_id: int) -> Dict[int, int]:
        return dict(self._by_song.get(song_id, {}))

    def global_average(self) -> float | None:
        """Mean of every rating on record, or None for an empty ledger."""
        if self._count == 0:
            return None
        return self._total / self._count

    def snapshot(self) -> RatingMatrix:
        if self._snapshot is None:
            self._snapshot = RatingMatrix.from_triples(
                (
                    (user_id, song_id, value)
                    for user_id, songs in self._by_user.items()
                    for song_id, value in songs.items()
                ),
                version=self.version,
            )
        return self._snapshot

    def _validate(self, value) -> int:
        # bool is an int subclass but never a star rating
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidArgument(f"rating must be an integer, got {value!r}")
        lo, hi = self.config.rating_min, self.config.rating_max
        if not lo <= value <= hi:
            raise InvalidArgument(f"rating {value} outside [{lo}, {hi}]")
        return int(value)

    def _touch(self) -> None:
        self.version += 1
        self._snapshot = None
