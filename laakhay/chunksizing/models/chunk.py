"""Chunk and chunk sample models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .dimension import DimensionSlice


class Chunk(BaseModel):
    """Immutable descriptor of a range-bounded partition of a hypertable."""

    chunk_id: int
    table_id: int
    hypertable_id: int
    table_name: str | None = None
    slices: dict[int, DimensionSlice] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_slices(self) -> "Chunk":
        """Validate slices are keyed by their own dimension id."""
        for dimension_id, dim_slice in self.slices.items():
            if dim_slice.dimension_id != dimension_id:
                raise ValueError(
                    f"slice for dimension {dim_slice.dimension_id} stored under key {dimension_id}"
                )
        return self

    @property
    def name(self) -> str:
        """Human readable chunk name for messages."""
        return self.table_name or f"chunk_{self.chunk_id}"

    def get_slice(self, dimension_id: int) -> DimensionSlice | None:
        """Get the chunk's slice on a dimension, if any."""
        return self.slices.get(dimension_id)

    model_config = ConfigDict(frozen=True)


class ChunkSample(BaseModel):
    """Fill characteristics of one chunk, read for a single estimation call.

    ``dimension_min`` and ``dimension_max`` are the actual extent of the data
    in internal units and always fall within the chunk's slice.
    """

    chunk: Chunk
    dimension_slice: DimensionSlice
    dimension_min: int
    dimension_max: int
    byte_size: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_extent(self) -> "ChunkSample":
        """Validate range_start <= dimension_min <= dimension_max <= range_end."""
        if self.dimension_min > self.dimension_max:
            raise ValueError("dimension_min must be <= dimension_max")
        bounds = self.dimension_slice
        if not bounds.contains(self.dimension_min) or not bounds.contains(self.dimension_max):
            raise ValueError(
                f"data extent [{self.dimension_min}, {self.dimension_max}] lies outside slice "
                f"[{self.dimension_slice.range_start}, {self.dimension_slice.range_end}]"
            )
        return self

    @property
    def slice_interval(self) -> int:
        return self.dimension_slice.interval

    @property
    def data_extent(self) -> int:
        return self.dimension_max - self.dimension_min

    model_config = ConfigDict(frozen=True)
