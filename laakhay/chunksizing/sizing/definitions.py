"""Result structures produced by the sizing components."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import EstimatePath, SampleClass
from ..models import ChunkSizingInfo


@dataclass(frozen=True)
class Advisory:
    """Recoverable condition reported to the user without failing the call.

    Attributes:
        message: Short description of the condition
        detail: Additional explanation (None if not applicable)
        level: Logging level name the advisory is reported at
    """

    message: str
    detail: str | None = None
    level: str = "WARNING"


@dataclass(frozen=True)
class SampleClassification:
    """Classification of one sampled chunk.

    Attributes:
        sample_class: Usable, undersized or ignored
        chunk_id: Id of the sampled chunk
        slice_interval: Configured interval of the chunk's slice
        interval_fillfactor: Data extent / slice interval (None if min/max unavailable)
        size_fillfactor: Extrapolated size / target size (None if not computed)
        extrapolated_size: Size the chunk would have if data spanned the whole slice
        contribution: Interval that would have hit the target size (usable only)
    """

    sample_class: SampleClass
    chunk_id: int
    slice_interval: int
    interval_fillfactor: float | None = None
    size_fillfactor: float | None = None
    extrapolated_size: float | None = None
    contribution: float | None = None


@dataclass
class WindowTotals:
    """Running totals over the classified samples of one window."""

    num_usable: int = 0
    usable_interval_sum: float = 0.0
    num_undersized: int = 0
    undersized_interval_sum: int = 0
    undersized_fillfactor_sum: float = 0.0

    def add(self, classification: SampleClassification) -> None:
        """Accumulate one classified sample."""
        if classification.sample_class is SampleClass.USABLE:
            if classification.contribution is None:
                raise ValueError("usable sample must carry an interval contribution")
            self.num_usable += 1
            self.usable_interval_sum += classification.contribution
        elif classification.sample_class is SampleClass.UNDERSIZED:
            if classification.size_fillfactor is None:
                raise ValueError("undersized sample must carry a size fill factor")
            self.num_undersized += 1
            self.undersized_interval_sum += classification.slice_interval
            self.undersized_fillfactor_sum += classification.size_fillfactor


@dataclass
class ConfigurationResult:
    """Outcome of configuring adaptive chunking on a hypertable.

    Attributes:
        sizing_info: Validated and persisted settings
        advisories: Configuration advisories (small target, missing index)
    """

    sizing_info: ChunkSizingInfo
    advisories: list[Advisory] = field(default_factory=list)


@dataclass
class IntervalEstimate:
    """Outcome of one interval estimation.

    Attributes:
        interval: Interval to use for the next chunk
        current_interval: Interval the dimension had before the estimate
        candidate: Reduced interval before hysteresis (None if no evidence)
        path: Reduction path that produced the candidate
        totals: Window totals the reduction was computed from
        classifications: Per-sample classifications, nearest chunk first
        advisories: Recoverable conditions met while sampling
    """

    interval: int
    current_interval: int
    candidate: int | None
    path: EstimatePath
    totals: WindowTotals = field(default_factory=WindowTotals)
    classifications: list[SampleClassification] = field(default_factory=list)
    advisories: list[Advisory] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.interval != self.current_interval
