"""Hypertable and adaptive sizing configuration models."""

from pydantic import BaseModel, ConfigDict, Field

from .dimension import DimensionInfo


class HypertableInfo(BaseModel):
    """Catalog metadata for a hypertable."""

    hypertable_id: int
    table_name: str = Field(..., min_length=1)
    dimensions: list[DimensionInfo] = Field(default_factory=list)
    chunk_sizing_strategy: str | None = None
    chunk_target_size: int = Field(default=0, ge=0)

    def open_dimension(self) -> DimensionInfo | None:
        """Get the first open dimension, the one adaptive chunking adapts."""
        for dimension in self.dimensions:
            if dimension.is_open:
                return dimension
        return None

    def get_dimension(self, dimension_id: int) -> DimensionInfo | None:
        for dimension in self.dimensions:
            if dimension.dimension_id == dimension_id:
                return dimension
        return None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class ChunkSizingInfo(BaseModel):
    """Adaptive chunking configuration for one hypertable.

    Attributes:
        target_table: Hypertable id the settings apply to
        target_size: Size directive as given by the user ("estimate", "off", "1GB", ...)
        target_size_bytes: Resolved target size in bytes (0 = disabled)
        sizing_strategy: Name of the sizing strategy to call on chunk creation
        dimension_column_name: Column of the dimension being adapted
        check_for_index: Whether to warn when that column has no index
    """

    target_table: int
    target_size: str | None = None
    target_size_bytes: int = Field(default=0, ge=0)
    sizing_strategy: str | None = None
    dimension_column_name: str | None = None
    check_for_index: bool = True

    @property
    def enabled(self) -> bool:
        return self.target_size_bytes > 0 and self.sizing_strategy is not None

    model_config = ConfigDict(frozen=True)
