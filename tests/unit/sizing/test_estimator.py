"""Unit tests for interval estimation."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import pytest
from helpers import (
    DAY,
    DIMENSION_ID,
    GB,
    HYPERTABLE_ID,
    TIME_COLUMN,
    add_chunk,
    build_catalog,
    byte_size_for,
)

from laakhay.chunksizing.core import (
    ColumnType,
    ComputationError,
    EstimatePath,
    INT64_MAX,
    SampleClass,
    UnknownDimensionError,
)
from laakhay.chunksizing.models import Chunk, DimensionSlice
from laakhay.chunksizing.sizing import (
    EstimatorConfig,
    IntervalEstimator,
    SampleClassification,
    WindowTotals,
    apply_hysteresis,
    compute_new_interval,
    reduce_window,
)


def _fill(chunk_factory, fillfactors, *, size_fillfactor, target=GB):
    for index, interval_fillfactor in enumerate(fillfactors):
        chunk_factory(
            index,
            interval_fillfactor=interval_fillfactor,
            byte_size=byte_size_for(
                interval_fillfactor=interval_fillfactor,
                size_fillfactor=size_fillfactor,
                target_size_bytes=target,
            ),
        )


class TestScenarios:
    """Reference scenarios for a 7 day interval and a 1 GB target."""

    def test_half_full_chunks_double_the_interval(self, catalog, chunk_factory):
        """Test three usable samples at size fill factor 0.5 give 14 days."""
        _fill(chunk_factory, [0.9, 0.9, 0.9], size_fillfactor=0.5)
        estimator = IntervalEstimator(catalog)

        estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        assert estimate.path == EstimatePath.NORMAL
        assert estimate.totals.num_usable == 3
        assert estimate.interval == pytest.approx(14 * DAY, rel=1e-6)
        assert estimate.interval == estimate.candidate
        assert estimate.changed

    def test_small_change_is_suppressed(self, catalog, chunk_factory):
        """Test a candidate within 15% of the current interval is discarded."""
        _fill(chunk_factory, [0.9, 0.9, 0.9], size_fillfactor=0.95)
        estimator = IntervalEstimator(catalog)

        estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        assert estimate.candidate == pytest.approx(7 * DAY / 0.95, rel=1e-6)
        assert estimate.interval == 7 * DAY
        assert not estimate.changed

    def test_sparse_chunks_are_ignored(self, catalog, chunk_factory):
        """Test chunks whose data spans at most half their slice are ignored."""
        _fill(chunk_factory, [0.5, 0.3, 0.1], size_fillfactor=0.5)
        estimator = IntervalEstimator(catalog)

        estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        assert estimate.path == EstimatePath.NO_EVIDENCE
        assert estimate.candidate is None
        assert estimate.interval == 7 * DAY
        assert all(c.sample_class == SampleClass.IGNORED for c in estimate.classifications)


class TestBootstrapPath:
    """Test the undersized-only estimation path."""

    def test_bootstrap_boosts_interval(self, catalog, chunk_factory):
        """Test only undersized chunks boost the interval toward usable size."""
        _fill(chunk_factory, [0.9, 0.9, 0.9], size_fillfactor=0.05)
        estimator = IntervalEstimator(catalog)

        estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        assert estimate.path == EstimatePath.BOOTSTRAP
        assert estimate.totals.num_undersized == 3
        # 0.165 / 0.05 = 3.3
        assert estimate.interval == pytest.approx(7 * DAY * 3.3, rel=1e-6)

    def test_single_undersized_chunk_keeps_interval(self, catalog, chunk_factory):
        """Test one undersized chunk and no usable chunk is not enough evidence."""
        chunk_factory(
            0,
            interval_fillfactor=0.9,
            byte_size=byte_size_for(
                interval_fillfactor=0.9, size_fillfactor=0.05, target_size_bytes=GB
            ),
        )
        chunk_factory(1, interval_fillfactor=0.2, byte_size=1000)
        chunk_factory(2, interval_fillfactor=None, byte_size=0)
        estimator = IntervalEstimator(catalog)

        estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        assert estimate.totals.num_undersized == 1
        assert estimate.path == EstimatePath.NO_EVIDENCE
        assert estimate.interval == 7 * DAY

    def test_usable_chunk_takes_precedence(self, catalog, chunk_factory):
        """Test undersized chunks are not used when a usable chunk exists."""
        for index, size_fillfactor in enumerate([0.05, 0.05, 0.25]):
            chunk_factory(
                index,
                interval_fillfactor=1.0,
                byte_size=byte_size_for(
                    interval_fillfactor=1.0,
                    size_fillfactor=size_fillfactor,
                    target_size_bytes=GB,
                ),
            )
        estimator = IntervalEstimator(catalog)

        estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        assert estimate.path == EstimatePath.NORMAL
        assert estimate.totals.num_usable == 1
        assert estimate.totals.num_undersized == 2
        assert estimate.interval == pytest.approx(7 * DAY / 0.25, rel=1e-6)

    def test_empty_undersized_chunks_fail(self, catalog, chunk_factory):
        """Test undersized chunks with zero bytes cannot be extrapolated."""
        _fill(chunk_factory, [0.9, 0.9], size_fillfactor=0.0)
        estimator = IntervalEstimator(catalog)

        with pytest.raises(ComputationError):
            estimator.estimate(DIMENSION_ID, 2 * 7 * DAY, GB)

    def test_boost_beyond_bigint_fails(self, catalog, chunk_factory):
        """Test a boosted interval that does not fit a bigint raises."""
        for index in range(3):
            chunk_factory(index, interval_fillfactor=0.9, byte_size=1)
        estimator = IntervalEstimator(catalog)

        with pytest.raises(ComputationError, match="bigint"):
            estimator(DIMENSION_ID, 3 * 7 * DAY, 1024**4)


class TestRejectedSamples:
    """Test chunks whose data cannot be sampled are ignored."""

    def test_value_outside_slice(self, catalog, chunk_factory, caplog):
        """Test a chunk holding a value before its slice start is ignored."""
        _fill(chunk_factory, [0.9, 0.9, 0.9], size_fillfactor=0.5)
        catalog.insert(100, TIME_COLUMN, [-5])
        estimator = IntervalEstimator(catalog)

        with caplog.at_level(logging.WARNING):
            estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        by_chunk = {c.chunk_id: c.sample_class for c in estimate.classifications}
        assert by_chunk == {
            1: SampleClass.IGNORED,
            2: SampleClass.USABLE,
            3: SampleClass.USABLE,
        }
        assert estimate.totals.num_usable == 2
        assert estimate.interval == pytest.approx(14 * DAY, rel=1e-6)
        rejected = [r for r in caplog.records if r.getMessage() == "chunk_sample_rejected"]
        assert len(rejected) == 1
        assert rejected[0].levelno == logging.WARNING
        assert rejected[0].chunk_id == 1

    def test_value_of_wrong_type(self, catalog, chunk_factory):
        """Test a chunk whose values do not convert to the column type is ignored."""
        chunk_factory(0, interval_fillfactor=None, byte_size=GB)
        catalog.insert(100, TIME_COLUMN, [0.5, 100.5])
        for index in (1, 2):
            chunk_factory(
                index,
                interval_fillfactor=0.9,
                byte_size=byte_size_for(
                    interval_fillfactor=0.9, size_fillfactor=0.5, target_size_bytes=GB
                ),
            )
        estimator = IntervalEstimator(catalog)

        estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        by_chunk = {c.chunk_id: c.sample_class for c in estimate.classifications}
        assert by_chunk[1] == SampleClass.IGNORED
        assert estimate.totals.num_usable == 2
        assert estimate.interval == pytest.approx(14 * DAY, rel=1e-6)


class TestWindow:
    """Test which chunks are sampled."""

    def test_samples_chunks_preceding_probe(self, catalog, chunk_factory):
        """Test the window is chosen along the dimension, not by creation order."""
        # Created out of order; chunks 4 and 5 would shrink the interval a lot
        for index in (5, 1, 4, 0, 2):
            size_fillfactor = 10.0 if index >= 4 else 0.5
            chunk_factory(
                index,
                interval_fillfactor=0.9,
                byte_size=byte_size_for(
                    interval_fillfactor=0.9,
                    size_fillfactor=size_fillfactor,
                    target_size_bytes=GB,
                ),
            )
        estimator = IntervalEstimator(catalog)

        estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        assert [c.chunk_id for c in estimate.classifications] == [3, 2, 1]
        assert estimate.interval == pytest.approx(14 * DAY, rel=1e-6)

    def test_window_size_is_bounded(self, catalog, chunk_factory):
        """Test at most window_size chunks are sampled."""
        _fill(chunk_factory, [0.9] * 6, size_fillfactor=0.5)
        estimator = IntervalEstimator(catalog, config=EstimatorConfig(window_size=2))

        estimate = estimator.estimate(DIMENSION_ID, 6 * 7 * DAY, GB)

        assert len(estimate.classifications) == 2

    def test_empty_window_keeps_interval(self, catalog):
        """Test no preceding chunk leaves the interval unchanged."""
        estimator = IntervalEstimator(catalog)

        assert estimator(DIMENSION_ID, 0, GB) == 7 * DAY

    def test_chunk_without_data_is_ignored(self, catalog, chunk_factory):
        """Test a chunk with no values degrades to an ignored sample."""
        _fill(chunk_factory, [0.9, 0.9], size_fillfactor=0.5)
        chunk_factory(2, interval_fillfactor=None, byte_size=8192)
        estimator = IntervalEstimator(catalog)

        estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        assert estimate.classifications[0].sample_class == SampleClass.IGNORED
        assert estimate.totals.num_usable == 2
        assert estimate.interval == pytest.approx(14 * DAY, rel=1e-6)

    def test_missing_index_reports_advisory(self, catalog):
        """Test chunks without an index are full scanned and reported once."""
        for index in range(3):
            add_chunk(
                catalog,
                index,
                interval_fillfactor=0.9,
                byte_size=byte_size_for(
                    interval_fillfactor=0.9, size_fillfactor=0.5, target_size_bytes=GB
                ),
                indexed=index != 0,
            )
        estimator = IntervalEstimator(catalog)

        estimate = estimator.estimate(DIMENSION_ID, 3 * 7 * DAY, GB)

        assert estimate.totals.num_usable == 3
        assert len(estimate.advisories) == 1
        assert '"time"' in estimate.advisories[0].message
        assert "_hyper_1_1_chunk" in estimate.advisories[0].message

    def test_chunk_without_slice_on_dimension_fails(self, catalog):
        """Test a chunk lacking a slice on the estimated dimension is fatal."""
        catalog.add_chunk(
            Chunk(
                chunk_id=1,
                table_id=100,
                hypertable_id=HYPERTABLE_ID,
                slices={99: DimensionSlice(dimension_id=99, range_start=0, range_end=10)},
            ),
            rows={TIME_COLUMN: [0]},
        )
        recent_chunks = catalog.get_recent_chunks

        def all_chunks(hypertable_id, probe_coordinate, window_size, *, dimension_id=None):
            return recent_chunks(hypertable_id, probe_coordinate, window_size, dimension_id=99)

        catalog.get_recent_chunks = all_chunks
        estimator = IntervalEstimator(catalog)

        with pytest.raises(UnknownDimensionError):
            estimator.estimate(DIMENSION_ID, 100, GB)


class TestEstimatorErrors:
    """Test fatal and no-op conditions."""

    def test_unknown_dimension(self, catalog):
        """Test an unknown dimension is fatal."""
        estimator = IntervalEstimator(catalog)

        with pytest.raises(UnknownDimensionError) as exc_info:
            estimator(999, 0, GB)

        assert exc_info.value.dimension_id == 999

    def test_non_positive_target_is_noop(self, catalog, chunk_factory):
        """Test a disabled target size returns the current interval."""
        _fill(chunk_factory, [0.9, 0.9, 0.9], size_fillfactor=0.5)
        estimator = IntervalEstimator(catalog)

        assert estimator(DIMENSION_ID, 3 * 7 * DAY, 0) == 7 * DAY
        assert estimator(DIMENSION_ID, 3 * 7 * DAY, -1) == 7 * DAY

    def test_interval_truncating_to_zero_fails(self):
        """Test a reduction below one unit raises instead of returning 0."""
        catalog = build_catalog(interval_length=1)
        for index in range(3):
            add_chunk(catalog, index, interval_fillfactor=1.0, byte_size=10 * GB)
        estimator = IntervalEstimator(catalog)

        with pytest.raises(ComputationError):
            estimator(DIMENSION_ID, 3, GB)

    def test_requires_data_source(self):
        """Test a catalog that cannot read chunk data needs a data source."""
        with pytest.raises(TypeError, match="data_source is required"):
            IntervalEstimator(object())  # type: ignore[arg-type]


class TestTimestampDimension:
    """Test estimation on a timestamptz dimension."""

    def test_datetime_values_are_converted(self):
        """Test datetime min/max values are read in microseconds."""
        catalog = build_catalog(column_type=ColumnType.TIMESTAMPTZ)
        epoch = datetime(1970, 1, 1, tzinfo=UTC)
        for index in range(3):
            start = index * 7 * DAY
            chunk = Chunk(
                chunk_id=index + 1,
                table_id=100 + index,
                hypertable_id=HYPERTABLE_ID,
                slices={
                    DIMENSION_ID: DimensionSlice(
                        dimension_id=DIMENSION_ID,
                        range_start=start,
                        range_end=start + 7 * DAY,
                    )
                },
            )
            first = epoch + timedelta(microseconds=start)
            catalog.add_chunk(
                chunk,
                rows={TIME_COLUMN: [first, first + timedelta(days=7)]},
                byte_size=GB // 2,
                indexed_columns=[TIME_COLUMN],
            )

        assert compute_new_interval(DIMENSION_ID, 21 * DAY, GB, catalog=catalog) == 14 * DAY


class TestReduction:
    """Test the pure reduction and hysteresis steps."""

    @pytest.mark.parametrize("size_fillfactor", [0.2, 0.4, 0.8])
    def test_scaling_law(self, size_fillfactor):
        """Test usable samples at fill factor k scale the interval by 1/k."""
        totals = WindowTotals(num_usable=3, usable_interval_sum=3 * (1000 / size_fillfactor))

        candidate, path = reduce_window(totals, EstimatorConfig())

        assert path == EstimatePath.NORMAL
        assert candidate == pytest.approx(1000 / size_fillfactor, abs=1)

    def test_bootstrap_uses_integer_average_interval(self):
        """Test the bootstrap path averages undersized intervals."""
        totals = WindowTotals(
            num_undersized=2,
            undersized_interval_sum=3000,
            undersized_fillfactor_sum=0.2,
        )

        candidate, path = reduce_window(totals, EstimatorConfig())

        assert path == EstimatePath.BOOTSTRAP
        assert candidate == pytest.approx(1500 * 1.65, abs=1)

    def test_no_evidence(self):
        """Test an empty window yields no candidate."""
        candidate, path = reduce_window(WindowTotals(num_undersized=1), EstimatorConfig())

        assert candidate is None
        assert path == EstimatePath.NO_EVIDENCE

    def test_average_beyond_bigint_fails(self):
        """Test a reduction larger than a bigint raises."""
        totals = WindowTotals(num_usable=1, usable_interval_sum=float(INT64_MAX) * 4)

        with pytest.raises(ComputationError, match="bigint"):
            reduce_window(totals, EstimatorConfig())

    @pytest.mark.parametrize(
        "classification",
        [
            SampleClassification(SampleClass.USABLE, chunk_id=1, slice_interval=100),
            SampleClassification(SampleClass.UNDERSIZED, chunk_id=1, slice_interval=100),
        ],
    )
    def test_incomplete_classification_is_rejected(self, classification):
        """Test totals refuse samples missing the values their class needs."""
        totals = WindowTotals()

        with pytest.raises(ValueError):
            totals.add(classification)

        assert totals == WindowTotals()

    @pytest.mark.parametrize(
        ("candidate", "expected"),
        [(100, 100), (114, 100), (86, 100), (116, 116), (84, 84), (200, 200), (10, 10)],
    )
    def test_hysteresis(self, candidate, expected):
        """Test candidates within 15% of the current interval are discarded."""
        assert apply_hysteresis(candidate, 100, 0.15) == expected
