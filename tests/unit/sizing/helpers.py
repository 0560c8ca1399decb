"""Builders for sizing tests."""

from __future__ import annotations

from laakhay.chunksizing.core import ColumnType
from laakhay.chunksizing.models import Chunk, DimensionInfo, DimensionSlice, HypertableInfo
from laakhay.chunksizing.sources import InMemoryCatalog

HYPERTABLE_ID = 1
DIMENSION_ID = 11
TIME_COLUMN = "time"
DAY = 86_400_000_000  # microseconds
GB = 1024**3


def build_catalog(
    *,
    interval_length: int = 7 * DAY,
    column_type: ColumnType = ColumnType.BIGINT,
    hypertable_indexed: bool = True,
) -> InMemoryCatalog:
    catalog = InMemoryCatalog()
    catalog.add_hypertable(
        HypertableInfo(
            hypertable_id=HYPERTABLE_ID,
            table_name="conditions",
            dimensions=[
                DimensionInfo(
                    dimension_id=DIMENSION_ID,
                    hypertable_id=HYPERTABLE_ID,
                    column_name=TIME_COLUMN,
                    column_type=column_type,
                    interval_length=interval_length,
                )
            ],
        ),
        indexed_columns=[TIME_COLUMN] if hypertable_indexed else [],
    )
    return catalog


def add_chunk(
    catalog: InMemoryCatalog,
    index: int,
    *,
    interval_fillfactor: float | None,
    byte_size: int,
    interval: int | None = None,
    indexed: bool = True,
) -> Chunk:
    """Add chunk number ``index`` whose data spans a fraction of its slice.

    With ``interval_fillfactor=None`` the chunk holds no data.
    """
    if interval is None:
        interval = catalog.get_dimension_metadata(DIMENSION_ID).interval_length
    start = index * interval
    chunk = Chunk(
        chunk_id=index + 1,
        table_id=100 + index,
        hypertable_id=HYPERTABLE_ID,
        table_name=f"_hyper_1_{index + 1}_chunk",
        slices={
            DIMENSION_ID: DimensionSlice(
                dimension_id=DIMENSION_ID, range_start=start, range_end=start + interval
            )
        },
    )
    rows: dict[str, list] = {TIME_COLUMN: []}
    if interval_fillfactor is not None:
        extent = round(interval_fillfactor * interval)
        rows[TIME_COLUMN] = [start + extent // 2, start, None, start + extent]
    catalog.add_chunk(
        chunk,
        rows=rows,
        byte_size=byte_size,
        indexed_columns=[TIME_COLUMN] if indexed else [],
    )
    return chunk


def byte_size_for(
    *, interval_fillfactor: float, size_fillfactor: float, target_size_bytes: int
) -> int:
    """Byte size giving a chunk the requested size fill factor."""
    return round(size_fillfactor * target_size_bytes * interval_fillfactor)


