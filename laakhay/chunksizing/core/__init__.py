"""Core components."""

from .enums import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    ColumnType,
    EstimatePath,
    SampleClass,
    ValueKind,
)
from .exceptions import (
    ChunkSizingError,
    ComputationError,
    InvalidConfigError,
    InvalidSignatureError,
    MissingConfigError,
    NoDataError,
    NoIndexError,
    UndefinedColumnError,
    UndefinedStrategyError,
    UndefinedTableError,
    UnknownDimensionError,
    ValidationError,
)
from .timeconv import interval_to_internal, time_value_to_internal

__all__ = [
    "ColumnType",
    "EstimatePath",
    "SampleClass",
    "ValueKind",
    "INT32_MIN",
    "INT32_MAX",
    "INT64_MIN",
    "INT64_MAX",
    "ChunkSizingError",
    "ComputationError",
    "InvalidConfigError",
    "InvalidSignatureError",
    "MissingConfigError",
    "NoDataError",
    "NoIndexError",
    "UndefinedColumnError",
    "UndefinedStrategyError",
    "UndefinedTableError",
    "UnknownDimensionError",
    "ValidationError",
    "interval_to_internal",
    "time_value_to_internal",
]
