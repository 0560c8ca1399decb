"""Validation and persistence of adaptive chunking settings."""

from __future__ import annotations

from ..core.exceptions import UndefinedColumnError, UndefinedStrategyError, UnknownDimensionError
from ..models import ChunkSizingInfo, HypertableInfo
from ..sources.base import CatalogSource, ChunkDataSource
from .config import MIN_RECOMMENDED_TARGET_SIZE
from .contract import (
    DEFAULT_STRATEGY_NAME,
    StrategyReference,
    StrategyRegistry,
    validate_sizing_strategy,
)
from .definitions import Advisory, ConfigurationResult
from .memory import MemoryBudgetEstimator
from .minmax import missing_index_advisory
from .telemetry import log_advisory

SMALL_TARGET_ADVISORY = Advisory(
    message="target chunk size for adaptive chunking is less than 10 MB",
)


def validate_sizing_info(
    info: ChunkSizingInfo,
    hypertable: HypertableInfo,
    *,
    memory: MemoryBudgetEstimator,
    registry: StrategyRegistry,
    data_source: ChunkDataSource,
) -> ConfigurationResult:
    """Validate adaptive chunking settings and resolve the target size.

    Args:
        info: Settings to validate
        hypertable: Hypertable the settings apply to
        memory: Estimator used to resolve the target size directive
        registry: Registry the sizing strategy is resolved in
        data_source: Source used to check for an index on the dimension column

    Returns:
        ConfigurationResult with the resolved settings and any advisories

    Raises:
        UnknownDimensionError: If no dimension column is set
        UndefinedColumnError: If the column is not a dimension of the hypertable
        UndefinedStrategyError: If the strategy does not resolve
        InvalidSignatureError: If the strategy signature does not match
        InvalidConfigError: If the target size cannot be parsed
        MissingConfigError: If "estimate" cannot read the host settings
    """
    if info.dimension_column_name is None:
        raise UnknownDimensionError("no open dimension found for adaptive chunking")

    if not any(dim.column_name == info.dimension_column_name for dim in hypertable.dimensions):
        raise UndefinedColumnError(f'column "{info.dimension_column_name}" does not exist')

    strategy = validate_sizing_strategy(info.sizing_strategy, registry)
    target_size_bytes = memory.estimate_target_size(info.target_size)
    resolved = info.model_copy(
        update={"sizing_strategy": strategy.name, "target_size_bytes": target_size_bytes}
    )
    result = ConfigurationResult(sizing_info=resolved)

    # Don't validate further if disabled
    if target_size_bytes <= 0:
        return result

    if target_size_bytes < MIN_RECOMMENDED_TARGET_SIZE:
        result.advisories.append(SMALL_TARGET_ADVISORY)
        log_advisory(SMALL_TARGET_ADVISORY, hypertable_id=hypertable.hypertable_id)

    if info.check_for_index and not data_source.has_minmax_index(
        hypertable.hypertable_id, info.dimension_column_name
    ):
        advisory = missing_index_advisory(
            info.dimension_column_name, "hypertable", hypertable.table_name
        )
        result.advisories.append(advisory)
        log_advisory(
            advisory,
            hypertable_id=hypertable.hypertable_id,
            column_name=info.dimension_column_name,
        )

    return result


def configure_adaptive_chunking(
    hypertable_id: int,
    *,
    catalog: CatalogSource,
    data_source: ChunkDataSource,
    memory: MemoryBudgetEstimator,
    registry: StrategyRegistry,
    target_size: str | None = None,
    strategy: StrategyReference | None = None,
    check_for_index: bool = True,
) -> ConfigurationResult:
    """Change the adaptive chunking settings of a hypertable.

    The first open dimension of the hypertable is the one adapted. When no
    strategy is given the hypertable keeps its current strategy, or gets the
    default one. The resolved strategy name and target size are persisted to
    the catalog; nothing else is modified.

    Raises:
        UndefinedTableError: If the hypertable does not exist
        UnknownDimensionError: If the hypertable has no open dimension
        (and everything validate_sizing_info raises)
    """
    hypertable = catalog.get_hypertable(hypertable_id)
    dimension = hypertable.open_dimension()
    if dimension is None:
        raise UnknownDimensionError("no open dimension found for adaptive chunking")

    if strategy is None:
        strategy = hypertable.chunk_sizing_strategy or DEFAULT_STRATEGY_NAME
    if not isinstance(strategy, str):
        # Callables are registered under their own name so chunk creation can find them
        validated = validate_sizing_strategy(strategy, registry)
        registry.register(
            validated.name, validated.func, descriptor=validated.descriptor, replace=True
        )
        strategy = validated.name

    info = ChunkSizingInfo(
        target_table=hypertable_id,
        target_size=target_size,
        sizing_strategy=strategy,
        dimension_column_name=dimension.column_name,
        check_for_index=check_for_index,
    )
    result = validate_sizing_info(
        info,
        hypertable,
        memory=memory,
        registry=registry,
        data_source=data_source,
    )

    sizing_info = result.sizing_info
    if sizing_info.sizing_strategy is None:
        raise UndefinedStrategyError("invalid chunk sizing function")
    catalog.set_chunk_sizing(
        hypertable_id, sizing_info.sizing_strategy, sizing_info.target_size_bytes
    )
    return result
