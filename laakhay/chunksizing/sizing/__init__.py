"""Adaptive chunk sizing.

This package computes the interval of the next chunk of a hypertable so that
chunks approach a target size in bytes, and derives that target size from
host memory settings.

Architecture:
    The sizing layer consists of:
    - memory.py: Target size estimation from directives and host memory
    - fillfactor.py: Classification of one sampled chunk
    - estimator.py: Interval estimation over a window of sampled chunks
    - contract.py: Sizing strategy signatures and registry
    - minmax.py: Index-assisted min/max reads with full scan fallback
    - adaptive.py: Validation and persistence of per-hypertable settings
    - service.py: Gate used by chunk creation
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .adaptive import configure_adaptive_chunking, validate_sizing_info
from .config import EstimatorConfig, MemoryBudgetContext
from .contract import (
    DEFAULT_STRATEGY_NAME,
    SIZING_STRATEGY_DESCRIPTOR,
    SizingStrategy,
    StrategyDescriptor,
    StrategyRegistry,
    sizing_strategy,
    validate_sizing_strategy,
)
from .definitions import (
    Advisory,
    ConfigurationResult,
    IntervalEstimate,
    SampleClassification,
    WindowTotals,
)
from .estimator import IntervalEstimator, apply_hysteresis, compute_new_interval, reduce_window
from .fillfactor import FillFactorAnalyzer
from .memory import (
    MemoryBudgetEstimator,
    estimate_target_size,
    parse_block_count,
    parse_memory_amount,
)
from .minmax import MinMaxReader
from .service import AdaptiveChunkSizer

__all__ = [
    "AdaptiveChunkSizer",
    "Advisory",
    "ConfigurationResult",
    "DEFAULT_STRATEGY_NAME",
    "EstimatorConfig",
    "FillFactorAnalyzer",
    "IntervalEstimate",
    "IntervalEstimator",
    "MemoryBudgetContext",
    "MemoryBudgetEstimator",
    "MinMaxReader",
    "SIZING_STRATEGY_DESCRIPTOR",
    "SampleClassification",
    "SizingStrategy",
    "StrategyDescriptor",
    "StrategyRegistry",
    "WindowTotals",
    "apply_hysteresis",
    "compute_new_interval",
    "configure_adaptive_chunking",
    "estimate_target_size",
    "parse_block_count",
    "parse_memory_amount",
    "reduce_window",
    "sizing_strategy",
    "validate_sizing_info",
    "validate_sizing_strategy",
]
