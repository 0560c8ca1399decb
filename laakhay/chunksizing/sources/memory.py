"""In-memory catalog and chunk data source."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from ..core.exceptions import (
    NoDataError,
    NoIndexError,
    UndefinedTableError,
    UnknownDimensionError,
)
from ..models import Chunk, DimensionInfo, HypertableInfo
from .base import CatalogSource, ChunkDataSource


@dataclass
class _ChunkTable:
    chunk: Chunk
    rows: dict[str, list[Any]] = field(default_factory=dict)
    indexed_columns: set[str] = field(default_factory=set)
    byte_size: int = 0


class InMemoryCatalog(CatalogSource, ChunkDataSource):
    """Catalog and data source backed by Python structures.

    Chunk tables hold column values as plain lists. ``snapshot()`` freezes
    values and byte sizes so that rows inserted while a snapshot is open are
    not visible to reads inside it.
    """

    def __init__(self) -> None:
        self._hypertables: dict[int, HypertableInfo] = {}
        self._tables: dict[int, _ChunkTable] = {}
        self._hypertable_indexes: dict[int, set[str]] = {}
        self._frozen: dict[int, tuple[dict[str, tuple[Any, ...]], int]] | None = None

    # Catalog registration

    def add_hypertable(
        self, hypertable: HypertableInfo, *, indexed_columns: Iterable[str] = ()
    ) -> None:
        """Register a hypertable.

        Hypertables and chunk tables share one relation id space.
        """
        if hypertable.hypertable_id in self._tables:
            raise ValueError(
                f"relation id {hypertable.hypertable_id} is already used by a chunk table"
            )
        self._hypertables[hypertable.hypertable_id] = hypertable
        self._hypertable_indexes[hypertable.hypertable_id] = set(indexed_columns)

    def add_chunk(
        self,
        chunk: Chunk,
        *,
        rows: dict[str, list[Any]] | None = None,
        byte_size: int = 0,
        indexed_columns: Iterable[str] = (),
    ) -> None:
        if chunk.hypertable_id not in self._hypertables:
            raise UndefinedTableError(f"hypertable {chunk.hypertable_id} does not exist")
        if chunk.table_id in self._hypertables:
            raise ValueError(f"relation id {chunk.table_id} is already used by a hypertable")
        self._tables[chunk.table_id] = _ChunkTable(
            chunk=chunk,
            rows={column: list(values) for column, values in (rows or {}).items()},
            indexed_columns=set(indexed_columns),
            byte_size=byte_size,
        )

    def insert(self, table_id: int, column_name: str, values: Iterable[Any]) -> None:
        """Append values to a chunk column."""
        self._table(table_id).rows.setdefault(column_name, []).extend(values)

    def set_byte_size(self, table_id: int, byte_size: int) -> None:
        self._table(table_id).byte_size = byte_size

    def set_dimension_interval(self, dimension_id: int, interval_length: int) -> None:
        """Apply a new interval to a dimension, as chunk creation would."""
        for hypertable_id, hypertable in self._hypertables.items():
            if hypertable.get_dimension(dimension_id) is None:
                continue
            dimensions = [
                dim.model_copy(update={"interval_length": interval_length})
                if dim.dimension_id == dimension_id
                else dim
                for dim in hypertable.dimensions
            ]
            self._hypertables[hypertable_id] = hypertable.model_copy(
                update={"dimensions": dimensions}
            )
            return
        raise UnknownDimensionError(
            f"dimension {dimension_id} does not exist", dimension_id=dimension_id
        )

    # CatalogSource

    def get_hypertable(self, hypertable_id: int) -> HypertableInfo:
        try:
            return self._hypertables[hypertable_id]
        except KeyError:
            raise UndefinedTableError(f"hypertable {hypertable_id} does not exist") from None

    def get_dimension_metadata(self, dimension_id: int) -> DimensionInfo:
        for hypertable in self._hypertables.values():
            dimension = hypertable.get_dimension(dimension_id)
            if dimension is not None:
                return dimension
        raise UnknownDimensionError(
            f"could not find a matching hypertable for dimension {dimension_id}",
            dimension_id=dimension_id,
        )

    def get_recent_chunks(
        self,
        hypertable_id: int,
        probe_coordinate: int,
        window_size: int,
        *,
        dimension_id: int | None = None,
    ) -> list[Chunk]:
        hypertable = self.get_hypertable(hypertable_id)
        if dimension_id is None:
            dimension = hypertable.open_dimension()
            if dimension is None:
                return []
            dimension_id = dimension.dimension_id

        preceding = []
        for table in self._tables.values():
            chunk = table.chunk
            if chunk.hypertable_id != hypertable_id:
                continue
            dim_slice = chunk.get_slice(dimension_id)
            if dim_slice is not None and dim_slice.range_start < probe_coordinate:
                preceding.append((dim_slice.range_start, chunk.chunk_id, chunk))

        preceding.sort(key=lambda item: (item[0], item[1]), reverse=True)
        return [chunk for _, _, chunk in preceding[:window_size]]

    def get_chunk_byte_size(self, table_id: int) -> int:
        if self._frozen is not None and table_id in self._frozen:
            return self._frozen[table_id][1]
        return self._table(table_id).byte_size

    def set_chunk_sizing(
        self, hypertable_id: int, strategy_name: str, target_size_bytes: int
    ) -> None:
        hypertable = self.get_hypertable(hypertable_id)
        self._hypertables[hypertable_id] = hypertable.model_copy(
            update={
                "chunk_sizing_strategy": strategy_name,
                "chunk_target_size": target_size_bytes,
            }
        )

    # ChunkDataSource

    def indexed_minmax(self, table_id: int, column_name: str) -> tuple[Any, Any]:
        if column_name not in self._table(table_id).indexed_columns:
            raise NoIndexError(f"no index on \"{column_name}\" for table {table_id}")
        return self._minmax(table_id, column_name)

    def full_scan_minmax(self, table_id: int, column_name: str) -> tuple[Any, Any]:
        return self._minmax(table_id, column_name)

    def has_minmax_index(self, table_id: int, column_name: str) -> bool:
        if table_id in self._hypertable_indexes:
            return column_name in self._hypertable_indexes[table_id]
        return column_name in self._table(table_id).indexed_columns

    @contextmanager
    def snapshot(self) -> Iterator[None]:
        if self._frozen is not None:
            # Nested blocks share the outermost snapshot
            yield
            return
        self._frozen = {
            table_id: (
                {column: tuple(values) for column, values in table.rows.items()},
                table.byte_size,
            )
            for table_id, table in self._tables.items()
        }
        try:
            yield
        finally:
            self._frozen = None

    # Helpers

    def _table(self, table_id: int) -> _ChunkTable:
        try:
            return self._tables[table_id]
        except KeyError:
            raise UndefinedTableError(f"chunk table {table_id} does not exist") from None

    def _minmax(self, table_id: int, column_name: str) -> tuple[Any, Any]:
        if self._frozen is not None and table_id in self._frozen:
            column = self._frozen[table_id][0].get(column_name, ())
        else:
            column = self._table(table_id).rows.get(column_name, [])
        values = [value for value in column if value is not None]
        if not values:
            raise NoDataError(f"no non-null values in \"{column_name}\" for table {table_id}")
        return min(values), max(values)
