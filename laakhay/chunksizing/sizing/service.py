"""Entry point used by chunk creation to size the next chunk.

The sizer is the gate in front of the sizing strategies: a strategy is only
invoked when the hypertable has a positive target size and a strategy set.
Otherwise the dimension's current interval is returned unchanged. The sizer
never applies the interval itself.
"""

from __future__ import annotations

from ..core.exceptions import UnknownDimensionError
from ..sources.base import CatalogSource, ChunkDataSource
from ..sources.host import StaticHostConfig
from .adaptive import configure_adaptive_chunking
from .config import EstimatorConfig
from .contract import (
    DEFAULT_STRATEGY_NAME,
    StrategyReference,
    StrategyRegistry,
    validate_sizing_strategy,
)
from .definitions import ConfigurationResult
from .estimator import IntervalEstimator
from .memory import MemoryBudgetEstimator


class AdaptiveChunkSizer:
    """Resolves the interval of the next chunk of a hypertable.

    The default estimator is registered under ``DEFAULT_STRATEGY_NAME`` in the
    sizer's registry unless the registry already holds a strategy with that
    name.
    """

    def __init__(
        self,
        catalog: CatalogSource,
        data_source: ChunkDataSource | None = None,
        *,
        registry: StrategyRegistry | None = None,
        memory: MemoryBudgetEstimator | None = None,
        config: EstimatorConfig | None = None,
    ) -> None:
        """Initialize the sizer.

        Args:
            catalog: Source of hypertable, dimension and chunk metadata
            data_source: Source of min/max reads (defaults to the catalog)
            registry: Strategy registry (a new one if not given)
            memory: Target size estimator (reads host settings from the
                environment if not given)
            config: Thresholds of the default estimator
        """
        self._catalog = catalog
        self._estimator = IntervalEstimator(catalog, data_source, config=config)
        self._data_source = self._estimator.data_source
        self._registry = registry or StrategyRegistry()
        self._memory = memory or MemoryBudgetEstimator(StaticHostConfig.from_environ())
        if DEFAULT_STRATEGY_NAME not in self._registry:
            self._registry.register(DEFAULT_STRATEGY_NAME, self._estimator)

    @property
    def registry(self) -> StrategyRegistry:
        return self._registry

    @property
    def estimator(self) -> IntervalEstimator:
        return self._estimator

    @property
    def memory(self) -> MemoryBudgetEstimator:
        return self._memory

    def next_interval(self, hypertable_id: int, coordinate: int) -> int:
        """Get the interval for the chunk that will cover ``coordinate``.

        Raises:
            UndefinedTableError: If the hypertable does not exist
            UnknownDimensionError: If the hypertable has no open dimension
            UndefinedStrategyError: If the configured strategy is not registered
            InvalidSignatureError: If the configured strategy's signature is invalid
            ComputationError: If the strategy returns an invalid interval
        """
        hypertable = self._catalog.get_hypertable(hypertable_id)
        dimension = hypertable.open_dimension()
        if dimension is None:
            raise UnknownDimensionError(
                f"hypertable {hypertable.table_name} has no open dimension"
            )

        target_size_bytes = hypertable.chunk_target_size
        if target_size_bytes <= 0 or hypertable.chunk_sizing_strategy is None:
            return dimension.interval_length

        strategy = validate_sizing_strategy(hypertable.chunk_sizing_strategy, self._registry)
        return strategy.invoke(dimension.dimension_id, coordinate, target_size_bytes)

    def configure(
        self,
        hypertable_id: int,
        *,
        target_size: str | None = None,
        strategy: StrategyReference | None = None,
        check_for_index: bool = True,
    ) -> ConfigurationResult:
        """Change the adaptive chunking settings of a hypertable."""
        return configure_adaptive_chunking(
            hypertable_id,
            catalog=self._catalog,
            data_source=self._data_source,
            memory=self._memory,
            registry=self._registry,
            target_size=target_size,
            strategy=strategy,
            check_for_index=check_for_index,
        )
