"""Tuning constants and configuration structures for adaptive chunk sizing."""

from __future__ import annotations

from dataclasses import dataclass

# Fixed storage block size of the engine, in bytes
BLOCK_SIZE = 8192

# Number of chunks we expect to keep in cache memory at the same time
DEFAULT_NUM_CHUNKS_TO_FIT_IN_CACHE_MEM = 4

# Number of chunks preceding the probe point that are sampled
DEFAULT_CHUNK_WINDOW = 3

# Data must span more than this fraction of a chunk's interval for the chunk
# to be used in an estimate
INTERVAL_FILLFACTOR_THRESH = 0.5

# A chunk's extrapolated size must exceed this fraction of the target size
# for the chunk to be used in a normal estimate
SIZE_FILLFACTOR_THRESH = 0.15

# Relative change required before a new interval replaces the current one
INTERVAL_MIN_CHANGE_THRESH = 0.15

# More than this many undersized chunks are needed for the bootstrap path
NUM_UNDERSIZED_INTERVALS = 1

# Fill factor the bootstrap path aims for. Slightly above
# SIZE_FILLFACTOR_THRESH so the next chunks qualify for the normal path.
UNDERSIZED_FILLFACTOR_THRESH = SIZE_FILLFACTOR_THRESH * 1.1

# Target sizes below this trigger a configuration advisory
MIN_RECOMMENDED_TARGET_SIZE = 10 * 1024 * 1024

# Host settings read by the "estimate" directive
SHARED_BUFFERS_KEY = "shared_buffers"
EFFECTIVE_CACHE_SIZE_KEY = "effective_cache_size"


@dataclass(frozen=True)
class EstimatorConfig:
    """Thresholds of the interval estimator.

    Attributes:
        window_size: Number of preceding chunks sampled per estimate
        interval_fillfactor_thresh: Minimum data extent / slice interval ratio
        size_fillfactor_thresh: Minimum extrapolated size / target size ratio
        min_change_thresh: Minimum relative change to commit a new interval
        num_undersized_intervals: Undersized chunk count that must be exceeded
            before the bootstrap path is used
        undersized_fillfactor_thresh: Fill factor the bootstrap path boosts to
    """

    window_size: int = DEFAULT_CHUNK_WINDOW
    interval_fillfactor_thresh: float = INTERVAL_FILLFACTOR_THRESH
    size_fillfactor_thresh: float = SIZE_FILLFACTOR_THRESH
    min_change_thresh: float = INTERVAL_MIN_CHANGE_THRESH
    num_undersized_intervals: int = NUM_UNDERSIZED_INTERVALS
    undersized_fillfactor_thresh: float = UNDERSIZED_FILLFACTOR_THRESH

    def __post_init__(self) -> None:
        """Validate estimator configuration."""
        if self.window_size <= 0:
            raise ValueError("window_size must be > 0")
        if self.undersized_fillfactor_thresh <= 0:
            raise ValueError("undersized_fillfactor_thresh must be > 0")
        if self.min_change_thresh < 0:
            raise ValueError("min_change_thresh must be >= 0")


@dataclass(frozen=True)
class MemoryBudgetContext:
    """Context for target size estimation.

    Attributes:
        block_size: Storage block size used to convert block counts to bytes
        chunks_in_cache: Number of chunks expected to share the cache
        fixed_effective_cache_size: When positive, returned as-is for the
            "estimate" directive, bypassing the host settings, the physical
            memory bound and chunks_in_cache. Only meant for tests.
    """

    block_size: int = BLOCK_SIZE
    chunks_in_cache: int = DEFAULT_NUM_CHUNKS_TO_FIT_IN_CACHE_MEM
    fixed_effective_cache_size: int | None = None

    def __post_init__(self) -> None:
        """Validate memory budget context."""
        if self.block_size <= 0:
            raise ValueError("block_size must be > 0")
        if self.chunks_in_cache <= 0:
            raise ValueError("chunks_in_cache must be > 0")
