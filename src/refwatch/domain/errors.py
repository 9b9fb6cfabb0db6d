class MatchError(Exception):
    """Base class for errors raised by the officiating core."""


class InvalidArgumentError(MatchError, ValueError):
    """
    Raised at the boundary for malformed input, e.g. a negative tick delta
    or a non-positive configured duration. Gameplay rejections (a goal during
    halftime, advancing from FULL_TIME) never raise; they leave state unchanged.
    """


class PersistenceError(MatchError):
    """
    A snapshot could not be stored or loaded.
    Non-fatal for a live match: the in-memory snapshot stays authoritative.
    """
