from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Tuple

import numpy as np

from radio.catalog import Catalog
from radio.config import DEFAULT_CONFIG, RadioConfig
from radio.entities import Song, Station, User
from radio.errors import require
from radio.ledger import RatingLedger
from radio.models.base import RatingPredictor, ScoredSong
from radio.models.predictor import PearsonPredictor
from radio.models.similarity import Similarity, SimilarityEngine
from radio.models.suggester import Suggester

logger = logging.getLogger(__name__)

PredictorFactory = Callable[[RadioConfig], RatingPredictor]


class StreamingRadio:
    """Backend of a personalized streaming radio.

    Owns the song catalog, the stations and the rating ledger, and answers
    rating predictions and song suggestions.

    Every mutation and every snapshot acquisition happens under one
    re-entrant lock. A prediction or suggestion captures an immutable rating
    snapshot together with the catalog song ids it needs, releases the lock
    and computes on that capture, so concurrent ratings are either fully
    visible to a call or not at all.

    Parameters
    ----------
    config : RadioConfig
        Rating bounds, neutral rating and candidate budget.
    predictor_factory : Callable[[RadioConfig], RatingPredictor]
        Builds the rating predictor bound to each new snapshot.
    """

    def __init__(
        self,
        config: RadioConfig = DEFAULT_CONFIG,
        predictor_factory: PredictorFactory = PearsonPredictor,
    ) -> None:
        self.config = config
        self.catalog = Catalog()
        self.ledger = RatingLedger(config)
        self._predictor_factory = predictor_factory
        self._lock = threading.RLock()
        self._predictor: RatingPredictor | None = None
        self._predictor_version = -1
        self._engine: SimilarityEngine | None = None

    # catalog

    def add_song(self, song: Song) -> None:
        with self._lock:
            self.catalog.add_song(song)

    def remove_song(self, song: Song) -> None:
        """Remove a song with its ratings and station memberships."""
        with self._lock:
            self.catalog.remove_song(song)
            dropped = self.ledger.remove_song(song.song_id)
        logger.debug("Removed song %d and %d rating(s)", song.song_id, dropped)

    def songs(self) -> List[Song]:
        with self._lock:
            return self.catalog.songs()

    def add_station(self, station: Station) -> None:
        with self._lock:
            self.catalog.add_station(station)

    def remove_station(self, station: Station) -> None:
        with self._lock:
            self.catalog.remove_station(station)

    def add_to_station(self, song: Song, station: Station) -> None:
        with self._lock:
            self.catalog.add_to_station(song, station)

    def remove_from_station(self, song: Song, station: Station) -> None:
        with self._lock:
            self.catalog.remove_from_station(song, station)

    def station_songs(self, station: Station) -> List[Song]:
        with self._lock:
            return self.catalog.station_songs(station)

    # ratings

    def rate_song(self, user: User, song: Song, rating: int) -> None:
        require(user, "user")
        with self._lock:
            self.catalog.require_song(song)
            self.ledger.set_rating(user.user_id, song.song_id, rating)

    def clear_rating(self, user: User, song: Song) -> None:
        require(user, "user")
        require(song, "song")
        with self._lock:
            self.ledger.clear_rating(user.user_id, song.song_id)

    def get_rating(self, user: User, song: Song) -> int | None:
        require(user, "user")
        require(song, "song")
        with self._lock:
            return self.ledger.get_rating(user.user_id, song.song_id)

    def unrated_songs(self, user: User) -> List[Song]:
        """Catalog songs ``user`` has not rated, in ascending id order."""
        require(user, "user")
        with self._lock:
            rated = self.ledger.ratings_for_user(user.user_id)
            ids = self.catalog.unrated_song_ids(rated)
            by_id = {song.song_id: song for song in self.catalog.songs()}
        return [by_id[int(sid)] for sid in ids]

    # recommendations

    def similarity(self, user_a: User, user_b: User) -> Similarity:
        require(user_a, "user_a")
        require(user_b, "user_b")
        with self._lock:
            self._refresh()
            engine = self._engine
        return engine.similarity(user_a.user_id, user_b.user_id)

    def predict_rating(self, user: User, song: Song) -> int:
        """Predicted stars ``user`` would give ``song``, in [1, 5]."""
        require(user, "user")
        with self._lock:
            self.catalog.require_song(song)
            predictor = self._refresh()
        return predictor.predict(user.user_id, song.song_id)

    def suggest_song(self, user: User) -> Song:
        """Unrated song with the highest predicted rating (lowest id on ties)."""
        return self.recommend(user, k=1)[0][0]

    def recommend(self, user: User, k: int = 10) -> List[Tuple[Song, int]]:
        """Top-k unrated songs for ``user`` with their predicted ratings."""
        require(user, "user")
        with self._lock:
            predictor = self._refresh()
            songs = {song.song_id: song for song in self.catalog.songs()}
        return self._rank(predictor, songs, user, k)

    def suggest_from_station(self, user: User, station: Station) -> Song:
        """Best unrated song among the songs of one station."""
        require(user, "user")
        with self._lock:
            songs = {song.song_id: song for song in self.catalog.station_songs(station)}
            predictor = self._refresh()
        return self._rank(predictor, songs, user, k=1)[0][0]

    def _rank(
        self,
        predictor: RatingPredictor,
        songs: Dict[int, Song],
        user: User,
        k: int,
    ) -> List[Tuple[Song, int]]:
        suggester = Suggester(predictor, self.config)
        ranked: List[ScoredSong] = suggester.recommend(
            user.user_id, np.fromiter(songs, dtype=np.int64, count=len(songs)), k=k
        )
        return [(songs[r.song_id], int(r.score)) for r in ranked]

    def _refresh(self) -> RatingPredictor:
        """Predictor bound to the current ledger snapshot. Caller holds the lock."""
        snapshot = self.ledger.snapshot()
        if self._predictor is None or self._predictor_version != snapshot.version:
            predictor = self._predictor_factory(self.config).fit(snapshot)
            if isinstance(predictor, PearsonPredictor):
                self._engine = predictor.engine
            else:
                self._engine = SimilarityEngine(snapshot)
            self._predictor = predictor
            self._predictor_version = snapshot.version
        return self._predictor
