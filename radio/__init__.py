from radio.catalog import Catalog
from radio.config import RadioConfig
from radio.entities import Song, Station, User
from radio.errors import (
    InvalidArgument,
    NoCandidates,
    NoRatingOnRecord,
    NotFound,
    RadioError,
)
from radio.ledger import RatingLedger
from radio.matrix import RatingMatrix
from radio.service import StreamingRadio

__all__ = [
    "Catalog",
    "RadioConfig",
    "Song",
    "Station",
    "User",
    "InvalidArgument",
    "NoCandidates",
    "NoRatingOnRecord",
    "NotFound",
    "RadioError",
    "RatingLedger",
    "RatingMatrix",
    "StreamingRadio",
]
