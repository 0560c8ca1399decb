"""Core enumerations shared by the sizing components.

Key Types:
    - ColumnType: Column types a partitioning dimension can be declared on
    - ValueKind: Scalar kinds used to describe sizing strategy signatures
    - SampleClass: Outcome of classifying one sampled chunk
    - EstimatePath: Which reduction path produced an interval
"""

from enum import Enum

INT16_MIN = -(2**15)
INT16_MAX = 2**15 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_KIND_BOUNDS = {
    "int16": (INT16_MIN, INT16_MAX),
    "int32": (INT32_MIN, INT32_MAX),
    "int64": (INT64_MIN, INT64_MAX),
}


class ColumnType(str, Enum):
    """Column types supported for partitioning dimensions."""

    SMALLINT = "smallint"
    INTEGER = "integer"
    BIGINT = "bigint"
    DATE = "date"
    TIMESTAMP = "timestamp"
    TIMESTAMPTZ = "timestamptz"

    @property
    def is_integer(self) -> bool:
        return self in (ColumnType.SMALLINT, ColumnType.INTEGER, ColumnType.BIGINT)

    @property
    def is_temporal(self) -> bool:
        return not self.is_integer


class ValueKind(str, Enum):
    """Scalar kinds for strategy parameters and return values.

    Names follow the engine's SQL type names so that signature errors read
    the same way the engine would print them.
    """

    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT64 = "float64"
    TEXT = "text"

    @property
    def sql_name(self) -> str:
        return {
            ValueKind.INT16: "smallint",
            ValueKind.INT32: "int",
            ValueKind.INT64: "bigint",
            ValueKind.FLOAT64: "double precision",
            ValueKind.TEXT: "text",
        }[self]

    def accepts(self, value: object) -> bool:
        """Check whether a Python value fits this kind."""
        if self in (ValueKind.INT16, ValueKind.INT32, ValueKind.INT64):
            if isinstance(value, bool) or not isinstance(value, int):
                return False
            low, high = _KIND_BOUNDS[self.value]
            return low <= value <= high
        if self is ValueKind.FLOAT64:
            return isinstance(value, float | int) and not isinstance(value, bool)
        return isinstance(value, str)


class SampleClass(str, Enum):
    """Classification of one sampled chunk."""

    USABLE = "usable"
    UNDERSIZED = "undersized"
    IGNORED = "ignored"


class EstimatePath(str, Enum):
    """Reduction path taken by the interval estimator."""

    NORMAL = "normal"
    BOOTSTRAP = "bootstrap"
    NO_EVIDENCE = "no_evidence"
