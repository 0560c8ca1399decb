"""Collaborator interfaces consumed by the sizing components.

Architecture:
    The estimators never touch storage or the host directly. They depend on
    three narrow capabilities:
    - CatalogSource: hypertable, dimension and chunk metadata
    - ChunkDataSource: snapshot-consistent min/max reads of one column
    - HostConfigSource: host settings and physical memory

Design Decisions:
    - Abstract base classes: Enforce one consistent interface per capability
    - Snapshot context: All sampling reads of one estimation happen inside a
      single ``snapshot()`` block so that concurrent inserts cannot skew a
      min/max read
    - Errors as exceptions: Lookups raise the core exception types; per-chunk
      failures (NoDataError, NoIndexError) are recoverable and handled by
      the caller

See Also:
    - InMemoryCatalog: In-process implementation of the catalog and data sources
    - StaticHostConfig: Mapping/environment backed host configuration
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..models import Chunk, DimensionInfo, HypertableInfo


class CatalogSource(ABC):
    """Metadata lookups for hypertables, dimensions and chunks."""

    @abstractmethod
    def get_hypertable(self, hypertable_id: int) -> HypertableInfo:
        """Get hypertable metadata.

        Raises:
            UndefinedTableError: If no such hypertable exists
        """

    @abstractmethod
    def get_dimension_metadata(self, dimension_id: int) -> DimensionInfo:
        """Get dimension metadata, including its current interval.

        Raises:
            UnknownDimensionError: If no such dimension exists
        """

    @abstractmethod
    def get_recent_chunks(
        self,
        hypertable_id: int,
        probe_coordinate: int,
        window_size: int,
        *,
        dimension_id: int | None = None,
    ) -> list[Chunk]:
        """Get up to ``window_size`` chunks preceding a point on a dimension.

        Chunks are ordered nearest-first along the dimension, not by
        creation order.
        """

    @abstractmethod
    def get_chunk_byte_size(self, table_id: int) -> int:
        """Get the total storage footprint of a chunk table in bytes."""

    @abstractmethod
    def set_chunk_sizing(
        self, hypertable_id: int, strategy_name: str, target_size_bytes: int
    ) -> None:
        """Persist the adaptive chunking settings of a hypertable."""


class ChunkDataSource(ABC):
    """Consistent-snapshot reads of one column's min/max for one table."""

    @abstractmethod
    def indexed_minmax(self, table_id: int, column_name: str) -> tuple[Any, Any]:
        """Find min and max of a column using an index on that column.

        Raises:
            NoIndexError: If the table has no index led by the column
            NoDataError: If the column has no non-null values
        """

    @abstractmethod
    def full_scan_minmax(self, table_id: int, column_name: str) -> tuple[Any, Any]:
        """Find min and max of a column by scanning every row.

        Raises:
            NoDataError: If the column has no non-null values
        """

    @abstractmethod
    def has_minmax_index(self, table_id: int, column_name: str) -> bool:
        """Check whether a table has an index usable for min/max lookups."""

    @contextmanager
    def snapshot(self) -> Iterator[None]:
        """Hold one consistent view of the data for the duration of the block.

        Sources that already read under the caller's transaction snapshot can
        keep this default.
        """
        yield


class HostConfigSource(ABC):
    """Host configuration and physical memory inspection."""

    @abstractmethod
    def read_host_config(self, key: str) -> str:
        """Read a host setting as text.

        Raises:
            MissingConfigError: If the setting is absent
        """

    @abstractmethod
    def read_physical_memory_bytes(self) -> int:
        """Total physical memory of the host in bytes."""
