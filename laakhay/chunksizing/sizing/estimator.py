"""Adaptive chunk interval estimation.

Given a dimension, a coordinate (point) on the dimension's axis and a target
chunk size in bytes, the estimator computes the interval that best fills the
next chunk to the target size.

The estimator looks back at the chunks that precede the coordinate and at how
close they came to the target size (their fill factor). For each sufficiently
filled chunk it computes the interval that would have filled that chunk to the
target size, and the new interval is the average of those.

Caveats:
    - Chunks are sampled by proximity along the dimension, not by creation
      order, since data is not guaranteed to arrive in dimension order.
    - Partially filled chunks are extrapolated from the extent of their data
      (see fillfactor.py).
    - A chunk whose extrapolated size is a tiny fraction of the target cannot
      tell the data rate reliably and is not used in a normal estimate. If
      the initial interval was set far too small, every chunk falls below that
      threshold and the normal path never adjusts. With no usable chunk but
      more than one undersized chunk, the bootstrap path boosts the interval
      so the next chunks cross into usable territory.
    - A new interval close to the current one is discarded to avoid flip-flop
      around the target size.
"""

from __future__ import annotations

import math

from pydantic import ValidationError as PydanticValidationError

from ..core.enums import INT64_MAX, EstimatePath
from ..core.exceptions import ComputationError, UnknownDimensionError, ValidationError
from ..models import Chunk, ChunkSample, DimensionInfo, DimensionSlice
from ..sources.base import CatalogSource, ChunkDataSource
from .config import EstimatorConfig
from .contract import SIZING_STRATEGY_DESCRIPTOR
from .definitions import IntervalEstimate, SampleClassification, WindowTotals
from .fillfactor import FillFactorAnalyzer
from .minmax import MinMaxReader
from .telemetry import (
    log_bootstrap,
    log_estimate,
    log_sample_classified,
    log_sample_rejected,
    log_window_summary,
)


def reduce_window(
    totals: WindowTotals,
    config: EstimatorConfig,
    *,
    dimension_id: int = 0,
) -> tuple[int | None, EstimatePath]:
    """Reduce window totals to a candidate interval.

    Args:
        totals: Accumulated classifications of the sampled window
        config: Estimator thresholds
        dimension_id: Dimension being estimated, for logging

    Returns:
        (candidate, path); candidate is None when there is not enough evidence

    Raises:
        ComputationError: If the reduction is non-finite, not positive or
            does not fit a bigint
    """
    if totals.num_usable > 0:
        value = totals.usable_interval_sum / totals.num_usable
        path = EstimatePath.NORMAL
    elif totals.num_undersized > config.num_undersized_intervals:
        avg_fillfactor = totals.undersized_fillfactor_sum / totals.num_undersized
        if avg_fillfactor <= 0:
            raise ComputationError("undersized chunks have no data to extrapolate from")
        incr_factor = config.undersized_fillfactor_thresh / avg_fillfactor
        avg_interval = totals.undersized_interval_sum // totals.num_undersized
        log_bootstrap(dimension_id=dimension_id, incr_factor=incr_factor)
        value = avg_interval * incr_factor
        path = EstimatePath.BOOTSTRAP
    else:
        return None, EstimatePath.NO_EVIDENCE

    if not math.isfinite(value) or value <= 0:
        raise ComputationError(f"calculated chunk interval {value} is not a positive finite value")
    candidate = int(value)
    if candidate <= 0:
        raise ComputationError(f"calculated chunk interval {value} truncates to {candidate}")
    if candidate > INT64_MAX:
        raise ComputationError(f"calculated chunk interval {candidate} is out of bigint range")
    return candidate, path


def apply_hysteresis(candidate: int, current_interval: int, min_change_thresh: float) -> int:
    """Keep the current interval unless the candidate differs enough from it."""
    interval_diff = abs(1.0 - candidate / current_interval)
    if interval_diff <= min_change_thresh:
        return current_interval
    return candidate


class IntervalEstimator:
    """Default sizing strategy: estimates the next interval from recent chunks.

    The estimator holds no state between calls. Instances are callable with
    the sizing strategy signature ``(int, bigint, bigint) -> bigint``.
    """

    _sizing_strategy = SIZING_STRATEGY_DESCRIPTOR

    def __init__(
        self,
        catalog: CatalogSource,
        data_source: ChunkDataSource | None = None,
        *,
        config: EstimatorConfig | None = None,
        analyzer: FillFactorAnalyzer | None = None,
    ) -> None:
        """Initialize the estimator.

        Args:
            catalog: Source of dimension and chunk metadata
            data_source: Source of min/max reads (defaults to the catalog when
                it implements ChunkDataSource)
            config: Estimator thresholds
            analyzer: Fill factor analyzer (defaults to one built from config)
        """
        if data_source is None:
            if not isinstance(catalog, ChunkDataSource):
                raise TypeError("data_source is required when the catalog cannot read chunk data")
            data_source = catalog
        self._catalog = catalog
        self._data_source = data_source
        self._config = config or EstimatorConfig()
        self._analyzer = analyzer or FillFactorAnalyzer(self._config)

    @property
    def config(self) -> EstimatorConfig:
        return self._config

    @property
    def data_source(self) -> ChunkDataSource:
        return self._data_source

    def __call__(self, dimension_id: int, probe_coordinate: int, target_size_bytes: int) -> int:
        return self.estimate(dimension_id, probe_coordinate, target_size_bytes).interval

    def estimate(
        self, dimension_id: int, probe_coordinate: int, target_size_bytes: int
    ) -> IntervalEstimate:
        """Estimate the interval of the next chunk on a dimension.

        Args:
            dimension_id: Dimension to estimate
            probe_coordinate: Point on the dimension the next chunk must cover
            target_size_bytes: Target chunk size in bytes

        Returns:
            IntervalEstimate with the interval and how it was derived

        Raises:
            UnknownDimensionError: If the dimension or its hypertable is unknown
            ComputationError: If the reduction yields an invalid interval
        """
        dimension = self._catalog.get_dimension_metadata(dimension_id)
        if dimension.hypertable_id <= 0:
            raise UnknownDimensionError(
                f"could not find a matching hypertable for dimension {dimension_id}",
                dimension_id=dimension_id,
            )
        current_interval = dimension.interval_length

        if target_size_bytes <= 0:
            return IntervalEstimate(
                interval=current_interval,
                current_interval=current_interval,
                candidate=None,
                path=EstimatePath.NO_EVIDENCE,
            )

        reader = MinMaxReader(self._data_source)
        totals = WindowTotals()
        classifications: list[SampleClassification] = []

        with self._data_source.snapshot():
            chunks = self._catalog.get_recent_chunks(
                dimension.hypertable_id,
                probe_coordinate,
                self._config.window_size,
                dimension_id=dimension_id,
            )
            for chunk in chunks:
                classification = self._classify_chunk(chunk, dimension, target_size_bytes, reader)
                totals.add(classification)
                classifications.append(classification)

        log_window_summary(
            dimension_id=dimension_id,
            target_size_bytes=target_size_bytes,
            current_interval=current_interval,
            num_usable=totals.num_usable,
            num_undersized=totals.num_undersized,
        )

        candidate, path = reduce_window(totals, self._config, dimension_id=dimension_id)
        if candidate is None:
            interval = current_interval
        else:
            interval = apply_hysteresis(candidate, current_interval, self._config.min_change_thresh)

        estimate = IntervalEstimate(
            interval=interval,
            current_interval=current_interval,
            candidate=candidate,
            path=path,
            totals=totals,
            classifications=classifications,
            advisories=list(reader.advisories),
        )
        log_estimate(
            hypertable_id=dimension.hypertable_id,
            dimension_id=dimension_id,
            estimate=estimate,
        )
        return estimate

    def _classify_chunk(
        self,
        chunk: Chunk,
        dimension: DimensionInfo,
        target_size_bytes: int,
        reader: MinMaxReader,
    ) -> SampleClassification:
        dim_slice = chunk.get_slice(dimension.dimension_id)
        if dim_slice is None:
            raise UnknownDimensionError(
                f"chunk {chunk.name} has no slice on dimension {dimension.dimension_id}",
                dimension_id=dimension.dimension_id,
            )

        byte_size = self._catalog.get_chunk_byte_size(chunk.table_id)
        try:
            sample = self._read_sample(chunk, dim_slice, dimension, byte_size, reader)
        except ValidationError as exc:
            log_sample_rejected(
                dimension_id=dimension.dimension_id,
                chunk_id=chunk.chunk_id,
                table_name=chunk.name,
                reason=str(exc),
            )
            sample = None

        if sample is None:
            classification = self._analyzer.ignored(chunk, dim_slice.interval)
        else:
            classification = self._analyzer.classify(sample, target_size_bytes)

        log_sample_classified(
            dimension_id=dimension.dimension_id,
            byte_size=byte_size,
            classification=classification,
        )
        return classification

    def _read_sample(
        self,
        chunk: Chunk,
        dim_slice: DimensionSlice,
        dimension: DimensionInfo,
        byte_size: int,
        reader: MinMaxReader,
    ) -> ChunkSample | None:
        """Build the sample of one chunk, or None when it holds no data.

        Raises:
            ValidationError: If the column values do not convert or fall
                outside the chunk's slice
        """
        minmax = reader.read(
            chunk.table_id,
            dimension.column_name,
            dimension.column_type,
            table_name=chunk.name,
        )
        if minmax is None:
            return None
        try:
            return ChunkSample(
                chunk=chunk,
                dimension_slice=dim_slice,
                dimension_min=minmax[0],
                dimension_max=minmax[1],
                byte_size=byte_size,
            )
        except PydanticValidationError as exc:
            raise ValidationError(f"invalid sample for chunk {chunk.name}: {exc}") from exc


def compute_new_interval(
    dimension_id: int,
    probe_coordinate: int,
    target_size_bytes: int,
    *,
    catalog: CatalogSource,
    data_source: ChunkDataSource | None = None,
    config: EstimatorConfig | None = None,
) -> int:
    """Compute the interval of the next chunk with the default estimator."""
    estimator = IntervalEstimator(catalog, data_source, config=config)
    return estimator(dimension_id, probe_coordinate, target_size_bytes)
