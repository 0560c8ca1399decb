"""Laakhay Chunk Sizing - Adaptive chunk intervals for time-series hypertables."""

from .core import (
    ChunkSizingError,
    ColumnType,
    ComputationError,
    EstimatePath,
    InvalidConfigError,
    InvalidSignatureError,
    MissingConfigError,
    SampleClass,
    UndefinedColumnError,
    UndefinedStrategyError,
    UndefinedTableError,
    UnknownDimensionError,
    ValidationError,
    ValueKind,
)
from .models import (
    Chunk,
    ChunkSample,
    ChunkSizingInfo,
    DimensionInfo,
    DimensionSlice,
    HypertableInfo,
)
from .sizing import (
    DEFAULT_STRATEGY_NAME,
    AdaptiveChunkSizer,
    Advisory,
    EstimatorConfig,
    FillFactorAnalyzer,
    IntervalEstimate,
    IntervalEstimator,
    MemoryBudgetContext,
    MemoryBudgetEstimator,
    StrategyDescriptor,
    StrategyRegistry,
    compute_new_interval,
    configure_adaptive_chunking,
    estimate_target_size,
    sizing_strategy,
    validate_sizing_strategy,
)
from .sources import (
    CatalogSource,
    ChunkDataSource,
    HostConfigSource,
    InMemoryCatalog,
    StaticHostConfig,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "ChunkSizingError",
    "ColumnType",
    "ComputationError",
    "EstimatePath",
    "InvalidConfigError",
    "InvalidSignatureError",
    "MissingConfigError",
    "SampleClass",
    "UndefinedColumnError",
    "UndefinedStrategyError",
    "UndefinedTableError",
    "UnknownDimensionError",
    "ValidationError",
    "ValueKind",
    # Models
    "Chunk",
    "ChunkSample",
    "ChunkSizingInfo",
    "DimensionInfo",
    "DimensionSlice",
    "HypertableInfo",
    # Sizing
    "DEFAULT_STRATEGY_NAME",
    "AdaptiveChunkSizer",
    "Advisory",
    "EstimatorConfig",
    "FillFactorAnalyzer",
    "IntervalEstimate",
    "IntervalEstimator",
    "MemoryBudgetContext",
    "MemoryBudgetEstimator",
    "StrategyDescriptor",
    "StrategyRegistry",
    "compute_new_interval",
    "configure_adaptive_chunking",
    "estimate_target_size",
    "sizing_strategy",
    "validate_sizing_strategy",
    # Sources
    "CatalogSource",
    "ChunkDataSource",
    "HostConfigSource",
    "InMemoryCatalog",
    "StaticHostConfig",
]
