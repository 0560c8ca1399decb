"""Fill factor classification of sampled chunks.

Chunks can be filled unevenly. Three typical shapes ('*' is data):

    |--------|
    | * * * *|  1. Evenly filled (ideal)
    |--------|

    |--------|
    |    ****|  2. Partially filled
    |--------|

    |--------|
    |  * * **|  3. Unevenly filled
    |--------|

Chunk (2) holds the same amount of data as (1), but the next chunk is likely
to be filled about twice as much. This is common for the first chunk of a
hypertable. To still use it, the data extent (max - min) is treated as the
chunk's interval and the chunk size is extrapolated to the full slice. Chunk
(3) gets no special treatment.
"""

from __future__ import annotations

from ..core.enums import SampleClass
from ..core.exceptions import ComputationError
from ..models import Chunk, ChunkSample
from .config import EstimatorConfig
from .definitions import SampleClassification


class FillFactorAnalyzer:
    """Classifies sampled chunks as usable, undersized or ignored.

    A chunk is usable when its data spans enough of its slice and its
    extrapolated size is a large enough share of the target size to give a
    reliable data rate. A chunk that spans enough of its slice but is too
    small is undersized; it only contributes when nothing usable exists.
    """

    def __init__(self, config: EstimatorConfig | None = None) -> None:
        self._config = config or EstimatorConfig()

    def classify(self, sample: ChunkSample, target_size_bytes: int) -> SampleClassification:
        """Classify one sample against a target size.

        Args:
            sample: Fill characteristics of the chunk
            target_size_bytes: Target chunk size in bytes (> 0)

        Returns:
            Classification with the sample's contribution

        Raises:
            ComputationError: If the target size is not positive
        """
        if target_size_bytes <= 0:
            raise ComputationError(f"target size must be > 0, got {target_size_bytes}")

        slice_interval = sample.slice_interval
        interval_fillfactor = sample.data_extent / slice_interval

        # An empty extent cannot be extrapolated, and it never passes the
        # interval threshold anyway
        if interval_fillfactor <= self._config.interval_fillfactor_thresh:
            return SampleClassification(
                sample_class=SampleClass.IGNORED,
                chunk_id=sample.chunk.chunk_id,
                slice_interval=slice_interval,
                interval_fillfactor=interval_fillfactor,
            )

        extrapolated_size = sample.byte_size / interval_fillfactor
        size_fillfactor = extrapolated_size / target_size_bytes

        if size_fillfactor > self._config.size_fillfactor_thresh:
            return SampleClassification(
                sample_class=SampleClass.USABLE,
                chunk_id=sample.chunk.chunk_id,
                slice_interval=slice_interval,
                interval_fillfactor=interval_fillfactor,
                size_fillfactor=size_fillfactor,
                extrapolated_size=extrapolated_size,
                contribution=slice_interval / size_fillfactor,
            )

        return SampleClassification(
            sample_class=SampleClass.UNDERSIZED,
            chunk_id=sample.chunk.chunk_id,
            slice_interval=slice_interval,
            interval_fillfactor=interval_fillfactor,
            size_fillfactor=size_fillfactor,
            extrapolated_size=extrapolated_size,
        )

    @staticmethod
    def ignored(chunk: Chunk, slice_interval: int) -> SampleClassification:
        """Classification for a chunk whose data extent could not be read."""
        return SampleClassification(
            sample_class=SampleClass.IGNORED,
            chunk_id=chunk.chunk_id,
            slice_interval=slice_interval,
        )
