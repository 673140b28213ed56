from __future__ import annotations

import logging
from dataclasses import astuple
from typing import Dict, Iterable, List

import numpy as np

from radio.entities import Song, Station
from radio.errors import InvalidArgument, NotFound, require

logger = logging.getLogger(__name__)


class Catalog:
    """Songs, stations and the station -> song membership relation.

    The catalog is not thread-safe on its own; ``StreamingRadio`` serializes
    access to it.
    """

    def __init__(self) -> None:
        self._songs: Dict[int, Song] = {}
        self._stations: Dict[int, Station] = {}
        self._playlists: Dict[int, set[int]] = {}

    # songs

    def add_song(self, song: Song) -> None:
        require(song, "song")
        existing = self._songs.get(song.song_id)
        if existing is not None:
            if astuple(existing) != astuple(song):
                raise InvalidArgument(
                    f"song id {song.song_id} is already used by {existing!r}"
                )
            return
        self._songs[song.song_id] = song
        logger.debug("Added song %d", song.song_id)

    def remove_song(self, song: Song) -> None:
        """Drop a song and every station membership that references it."""
        require(song, "song")
        if song.song_id not in self._songs:
            raise NotFound(f"song {song.song_id} is not in the catalog")
        del self._songs[song.song_id]
        for members in self._playlists.values():
            members.discard(song.song_id)
        logger.debug("Removed song %d", song.song_id)

    def require_song(self, song: Song) -> Song:
        require(song, "song")
        if song.song_id not in self._songs:
            raise NotFound(f"song {song.song_id} is not in the catalog")
        return self._songs[song.song_id]

    def songs(self) -> List[Song]:
        """All songs, in ascending id order."""
        return [self._songs[sid] for sid in sorted(self._songs)]

    def song_ids(self) -> np.ndarray:
        """Ascending array of every song id in the catalog."""
        return np.array(sorted(self._songs), dtype=np.int64)

    def unrated_song_ids(self, rated: Iterable[int]) -> np.ndarray:
        """Ascending song ids of the catalog minus ``rated``."""
        ids = self.song_ids()
        rated_ids = np.fromiter(rated, dtype=np.int64)
        if rated_ids.size == 0:
            return ids
        return ids[~np.isin(ids, rated_ids)]

    # stations

    def add_station(self, station: Station) -> None:
        require(station, "station")
        existing = self._stations.get(station.station_id)
        if existing is not None:
            if astuple(existing) != astuple(station):
                raise InvalidArgument(
                    f"station id {station.station_id} is already used by {existing!r}"
                )
            return
        self._stations[station.station_id] = station
        self._playlists[station.station_id] = set()
        logger.debug("Added station %d", station.station_id)

    def remove_station(self, station: Station) -> None:
        """Drop a station. Its songs stay in the catalog."""
        self._require_station(station)
        del self._stations[station.station_id]
        del self._playlists[station.station_id]
        logger.debug("Removed station %d", station.station_id)

    def add_to_station(self, song: Song, station: Station) -> None:
        self.require_song(song)
        self._require_station(station)
        self._playlists[station.station_id].add(song.song_id)

    def remove_from_station(self, song: Song, station: Station) -> None:
        self.require_song(song)
        members = self._playlists[self._require_station(station).station_id]
        if song.song_id not in members:
            raise NotFound(
                f"song {song.song_id} is not on station {station.station_id}"
            )
        members.remove(song.song_id)

    def station_song_ids(self, station: Station) -> np.ndarray:
        members = self._playlists[self._require_station(station).station_id]
        return np.array(sorted(members), dtype=np.int64)

    def station_songs(self, station: Station) -> List[Song]:
        return [self._songs[int(sid)] for sid in self.station_song_ids(station)]

    def _require_station(self, station: Station) -> Station:
        require(station, "station")
        if station.station_id not in self._stations:
            raise NotFound(f"station {station.station_id} does not exist")
        return self._stations[station.station_id]
