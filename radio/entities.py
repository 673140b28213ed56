from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, kw_only=True, order=True)
class Song:
    """A catalog song. Identity and ordering are by ``song_id`` alone."""

    song_id: int
    title: str = field(default="", compare=False)
    artist: str = field(default="", compare=False)


@dataclass(frozen=True, kw_only=True, order=True)
class User:
    user_id: int
    name: str = field(default="", compare=False)


@dataclass(frozen=True, kw_only=True, order=True)
class Station:
    station_id: int
    name: str = field(default="", compare=False)
