"""Dimension and dimension slice models."""

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.enums import ColumnType
from ..core.exceptions import ValidationError
from ..core.timeconv import interval_to_internal


class DimensionInfo(BaseModel):
    """Catalog metadata for a partitioning dimension."""

    dimension_id: int
    hypertable_id: int
    column_name: str = Field(..., min_length=1)
    column_type: ColumnType
    interval_length: int = Field(..., gt=0)
    is_open: bool = True

    @field_validator("interval_length", mode="before")
    @classmethod
    def convert_interval(cls, v, info):
        """Convert a timedelta interval into microseconds for temporal columns."""
        if isinstance(v, timedelta) and "column_type" in info.data:
            try:
                return interval_to_internal(v, info.data["column_type"])
            except ValidationError as exc:
                raise ValueError(str(exc)) from exc
        return v

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class DimensionSlice(BaseModel):
    """Half-open range ``[range_start, range_end)`` of a chunk on one dimension.

    The width of the slice is the interval the chunk was created with, not the
    extent of the data it holds.
    """

    dimension_id: int
    range_start: int
    range_end: int

    @model_validator(mode="after")
    def validate_range(self) -> "DimensionSlice":
        """Validate range_start < range_end."""
        if self.range_end <= self.range_start:
            raise ValueError("range_end must be > range_start")
        return self

    @property
    def interval(self) -> int:
        """Configured interval of the slice."""
        return self.range_end - self.range_start

    def contains(self, value: int) -> bool:
        """Check whether a value falls inside the closed range of the slice."""
        return self.range_start <= value <= self.range_end

    model_config = ConfigDict(frozen=True)
