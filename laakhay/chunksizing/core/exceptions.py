"""Custom exception hierarchy.

Fatal errors abort the call and propagate to the caller. ``NoDataError`` and
``NoIndexError`` are raised by data sources for a single chunk and are
absorbed by the min/max reader, which degrades that chunk to an ignored
sample.
"""

from __future__ import annotations


class ChunkSizingError(Exception):
    """Base exception for all library errors."""

    pass


class InvalidConfigError(ChunkSizingError):
    """A configured amount or setting could not be parsed or is out of range."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class MissingConfigError(ChunkSizingError):
    """A required host configuration setting is absent or unparseable."""

    def __init__(self, message: str, key: str | None = None, hint: str | None = None) -> None:
        super().__init__(message)
        self.key = key
        self.hint = hint


class UnknownDimensionError(ChunkSizingError):
    """Dimension (or its hypertable) could not be found in the catalog."""

    def __init__(self, message: str, dimension_id: int | None = None) -> None:
        super().__init__(message)
        self.dimension_id = dimension_id


class UndefinedTableError(ChunkSizingError):
    """Table does not exist or is not a hypertable."""

    pass


class UndefinedColumnError(ChunkSizingError):
    """Column does not exist on the target table."""

    pass


class UndefinedStrategyError(ChunkSizingError):
    """Sizing strategy reference does not resolve to a known strategy."""

    pass


class InvalidSignatureError(ChunkSizingError):
    """Sizing strategy declares an incompatible signature."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ComputationError(ChunkSizingError):
    """Interval computation produced a non-finite or non-positive value."""

    pass


class ValidationError(ChunkSizingError):
    """Data validation failure."""

    pass


class NoDataError(ChunkSizingError):
    """Chunk has no non-null values in the requested column."""

    pass


class NoIndexError(ChunkSizingError):
    """Chunk has no index usable for a min/max lookup on the requested column."""

    pass
