"""Min/max lookup of a chunk's dimension column.

An index led by the column answers the lookup with two probes. Without such
an index the reader falls back to a full scan, which can be costly, and
reports an advisory recommending an index.
"""

from __future__ import annotations

from ..core.enums import ColumnType
from ..core.exceptions import NoDataError, NoIndexError
from ..core.timeconv import time_value_to_internal
from ..sources.base import ChunkDataSource
from .definitions import Advisory
from .telemetry import log_advisory

MISSING_INDEX_DETAIL = "Adaptive chunking works best with an index on the dimension being adapted."


def missing_index_advisory(column_name: str, relation_kind: str, relation_name: str) -> Advisory:
    return Advisory(
        message=(
            f'no index on "{column_name}" found for adaptive chunking on '
            f'{relation_kind} "{relation_name}"'
        ),
        detail=MISSING_INDEX_DETAIL,
    )


class MinMaxReader:
    """Reads the data extent of chunks in internal units.

    The missing-index advisory is reported once per (table, column) for the
    lifetime of the reader. Advisories raised so far are available through
    ``advisories``.
    """

    def __init__(self, source: ChunkDataSource) -> None:
        self._source = source
        self._advised: set[tuple[int, str]] = set()
        self.advisories: list[Advisory] = []

    def read(
        self,
        table_id: int,
        column_name: str,
        column_type: ColumnType,
        *,
        table_name: str | None = None,
    ) -> tuple[int, int] | None:
        """Get min and max of a column, or None when the column holds no data.

        Args:
            table_id: Chunk table to read
            column_name: Dimension column
            column_type: Declared type of the column
            table_name: Chunk name used in advisories

        Returns:
            (min, max) converted to internal units, or None
        """
        try:
            try:
                low, high = self._source.indexed_minmax(table_id, column_name)
            except NoIndexError:
                self._advise_missing_index(table_id, column_name, table_name)
                low, high = self._source.full_scan_minmax(table_id, column_name)
        except NoDataError:
            return None

        return (
            time_value_to_internal(low, column_type),
            time_value_to_internal(high, column_type),
        )

    def _advise_missing_index(
        self, table_id: int, column_name: str, table_name: str | None
    ) -> None:
        key = (table_id, column_name)
        if key in self._advised:
            return
        self._advised.add(key)
        advisory = missing_index_advisory(column_name, "chunk", table_name or str(table_id))
        self.advisories.append(advisory)
        log_advisory(advisory, table_id=table_id, column_name=column_name)
