"""Structured logging for adaptive chunk sizing.

This module provides telemetry hooks for the sizing components, emitting
structured logs for observability. Per-sample detail is logged at DEBUG,
interval changes at INFO and advisories at their own level.
"""

from __future__ import annotations

import logging

from .definitions import Advisory, IntervalEstimate, SampleClassification

logger = logging.getLogger(__name__)


def log_sample_classified(
    *,
    dimension_id: int,
    byte_size: int,
    classification: SampleClassification,
) -> None:
    """Log the fill characteristics of one sampled chunk.

    Args:
        dimension_id: Dimension being estimated
        byte_size: Current storage footprint of the chunk
        classification: Classification of the sample
    """
    logger.debug(
        "chunk_sample_classified",
        extra={
            "dimension_id": dimension_id,
            "chunk_id": classification.chunk_id,
            "slice_interval": classification.slice_interval,
            "interval_fillfactor": classification.interval_fillfactor,
            "current_chunk_size": byte_size,
            "extrapolated_chunk_size": classification.extrapolated_size,
            "size_fillfactor": classification.size_fillfactor,
            "sample_class": classification.sample_class.value,
        },
    )


def log_sample_rejected(*, dimension_id: int, chunk_id: int, table_name: str, reason: str) -> None:
    """Log a sampled chunk whose data could not be used, so it is ignored."""
    logger.warning(
        "chunk_sample_rejected",
        extra={
            "dimension_id": dimension_id,
            "chunk_id": chunk_id,
            "table_name": table_name,
            "reason": reason,
        },
    )


def log_window_summary(
    *,
    dimension_id: int,
    target_size_bytes: int,
    current_interval: int,
    num_usable: int,
    num_undersized: int,
) -> None:
    """Log the totals of a sampled window."""
    logger.debug(
        "chunk_window_summary",
        extra={
            "dimension_id": dimension_id,
            "chunk_target_size_bytes": target_size_bytes,
            "current_interval": current_interval,
            "num_intervals": num_usable,
            "num_undersized_intervals": num_undersized,
        },
    )


def log_bootstrap(*, dimension_id: int, incr_factor: float) -> None:
    """Log that only undersized chunks were found and the interval is boosted."""
    logger.debug(
        "chunk_interval_bootstrap",
        extra={"dimension_id": dimension_id, "incr_factor": incr_factor},
    )


def log_estimate(*, hypertable_id: int, dimension_id: int, estimate: IntervalEstimate) -> None:
    """Log the outcome of an estimate.

    A changed interval is logged at INFO, everything else at DEBUG.
    """
    payload = {
        "hypertable_id": hypertable_id,
        "dimension_id": dimension_id,
        "path": estimate.path.value,
        "candidate_interval": estimate.candidate,
        "current_interval": estimate.current_interval,
        "interval": estimate.interval,
    }
    if estimate.changed:
        logger.info("chunk_interval_changed", extra=payload)
    else:
        logger.debug("chunk_interval_kept", extra=payload)


def log_target_size(*, directive: str, target_size_bytes: int) -> None:
    """Log the resolution of a target size directive."""
    logger.debug(
        "chunk_target_size_resolved",
        extra={"directive": directive, "target_size_bytes": target_size_bytes},
    )


def log_advisory(advisory: Advisory, **context: object) -> None:
    """Emit an advisory at its logging level.

    Args:
        advisory: Advisory to report
        **context: Additional structured fields (table, column, ...)
    """
    level = logging.getLevelName(advisory.level)
    if not isinstance(level, int):
        level = logging.WARNING
    logger.log(
        level,
        advisory.message,
        extra={"advisory_detail": advisory.detail, **context},
    )
