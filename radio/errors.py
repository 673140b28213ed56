class RadioError(Exception):
    """Base class for all streaming-radio errors."""


class InvalidArgument(RadioError, ValueError):
    """Missing identity, out-of-range rating or otherwise malformed input."""


class NotFound(RadioError, LookupError):
    """Referenced song or station does not exist."""


class NoCandidates(RadioError):
    """There is no unrated song left to suggest."""


class NoRatingOnRecord(RadioError, LookupError):
    """Clearing a rating that was never set (or was already cleared)."""


def require(value, name: str):
    """Return ``value`` unchanged, raising ``InvalidArgument`` when it is None."""
    if value is None:
        raise InvalidArgument(f"{name} must not be None")
    return value
