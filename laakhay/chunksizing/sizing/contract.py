"""Sizing strategy contract and registry.

Architecture:
    Chunk creation calls a sizing strategy to get the interval of the next
    chunk. Any callable can serve as a strategy as long as it declares the
    signature ``(int, bigint, bigint) -> bigint``: dimension id, probe
    coordinate and target size in bytes, returning the new interval.

Design Decisions:
    - Static descriptors: Strategies declare their parameter and return kinds
      with a ``StrategyDescriptor``; validation compares descriptors
      structurally and never inspects Python signatures or annotations
    - Decorator-based declaration: ``sizing_strategy`` stores the descriptor on
      the callable, the same way feature handlers carry their metadata
    - Injected registry: Strategies are resolved by name through a registry
      owned by the caller, there is no process-wide registry
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..core.enums import ValueKind
from ..core.exceptions import (
    ComputationError,
    InvalidSignatureError,
    UndefinedStrategyError,
    ValidationError,
)

DEFAULT_STRATEGY_NAME = "calculate_chunk_interval"

SIGNATURE_HINT = "A chunk sizing function's signature should be (int, bigint, bigint) -> bigint"

_DESCRIPTOR_ATTR = "_sizing_strategy"


@dataclass(frozen=True)
class StrategyDescriptor:
    """Declared parameter and return kinds of a strategy."""

    param_kinds: tuple[ValueKind, ...]
    return_kind: ValueKind

    def describe(self) -> str:
        params = ", ".join(kind.sql_name for kind in self.param_kinds)
        return f"({params}) -> {self.return_kind.sql_name}"


SIZING_STRATEGY_DESCRIPTOR = StrategyDescriptor(
    param_kinds=(ValueKind.INT32, ValueKind.INT64, ValueKind.INT64),
    return_kind=ValueKind.INT64,
)


def check_signature(descriptor: StrategyDescriptor | None) -> None:
    """Check a descriptor against the sizing strategy contract.

    Raises:
        InvalidSignatureError: If the descriptor is missing or does not match
    """
    if descriptor != SIZING_STRATEGY_DESCRIPTOR:
        raise InvalidSignatureError("invalid function signature", hint=SIGNATURE_HINT)


def sizing_strategy(
    param_kinds: tuple[ValueKind, ...] = SIZING_STRATEGY_DESCRIPTOR.param_kinds,
    return_kind: ValueKind = SIZING_STRATEGY_DESCRIPTOR.return_kind,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to declare a callable's strategy signature.

    Usage:
        @sizing_strategy()
        def fixed_interval(dimension_id, coordinate, target_size_bytes):
            return 86_400_000_000

    Args:
        param_kinds: Declared parameter kinds
        return_kind: Declared return kind

    Returns:
        Decorator function
    """
    descriptor = StrategyDescriptor(param_kinds=tuple(param_kinds), return_kind=return_kind)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, _DESCRIPTOR_ATTR, descriptor)
        return func

    return decorator


def get_descriptor(func: Callable[..., Any]) -> StrategyDescriptor | None:
    """Get the descriptor declared on a callable, if any."""
    descriptor = getattr(func, _DESCRIPTOR_ATTR, None)
    return descriptor if isinstance(descriptor, StrategyDescriptor) else None


@dataclass(frozen=True)
class SizingStrategy:
    """A named strategy with its declared signature."""

    name: str
    func: Callable[..., Any]
    descriptor: StrategyDescriptor | None

    def invoke(self, dimension_id: int, probe_coordinate: int, target_size_bytes: int) -> int:
        """Call the strategy, enforcing the contract on arguments and result.

        Raises:
            ValidationError: If an argument does not fit its declared kind
            ComputationError: If the result is not a positive int64
        """
        check_signature(self.descriptor)
        args = (dimension_id, probe_coordinate, target_size_bytes)
        kinds = SIZING_STRATEGY_DESCRIPTOR.param_kinds
        for position, (value, kind) in enumerate(zip(args, kinds, strict=True)):
            if not kind.accepts(value):
                raise ValidationError(
                    f"argument {position + 1} of '{self.name}' must be {kind.sql_name}, "
                    f"got {value!r}"
                )

        result = self.func(*args)
        if not ValueKind.INT64.accepts(result):
            raise ComputationError(
                f"sizing strategy '{self.name}' returned {result!r}, not a bigint"
            )
        if result <= 0:
            raise ComputationError(
                f"sizing strategy '{self.name}' returned a non-positive interval {result}"
            )
        return result


StrategyReference = str | Callable[..., Any] | SizingStrategy


class StrategyRegistry:
    """Maps strategy names to callables."""

    def __init__(self) -> None:
        self._strategies: dict[str, SizingStrategy] = {}

    def register(
        self,
        name: str,
        func: Callable[..., Any],
        *,
        descriptor: StrategyDescriptor | None = None,
        replace: bool = False,
    ) -> SizingStrategy:
        """Register a strategy under a name.

        The descriptor defaults to the one declared with ``sizing_strategy``.
        Registration does not validate the signature; that happens when a
        strategy is selected for a hypertable.

        Raises:
            ValueError: If the name is taken and replace is False
        """
        if name in self._strategies and not replace:
            raise ValueError(f"Sizing strategy '{name}' is already registered")
        strategy = SizingStrategy(
            name=name, func=func, descriptor=descriptor or get_descriptor(func)
        )
        self._strategies[name] = strategy
        return strategy

    def unregister(self, name: str) -> None:
        if name not in self._strategies:
            raise UndefinedStrategyError(f"sizing strategy '{name}' is not registered")
        del self._strategies[name]

    def get(self, name: str) -> SizingStrategy:
        try:
            return self._strategies[name]
        except KeyError:
            raise UndefinedStrategyError(f"invalid chunk sizing function '{name}'") from None

    def names(self) -> list[str]:
        return sorted(self._strategies)

    def __contains__(self, name: object) -> bool:
        return name in self._strategies

    def resolve(self, reference: StrategyReference) -> SizingStrategy:
        """Resolve a name, callable or strategy into a SizingStrategy."""
        if isinstance(reference, SizingStrategy):
            return reference
        if isinstance(reference, str):
            return self.get(reference)
        if callable(reference):
            name = getattr(reference, "__qualname__", None) or type(reference).__name__
            return SizingStrategy(name=name, func=reference, descriptor=get_descriptor(reference))
        raise UndefinedStrategyError("invalid chunk sizing function")


def validate_sizing_strategy(
    reference: StrategyReference | None,
    registry: StrategyRegistry | None = None,
) -> SizingStrategy:
    """Resolve a strategy reference and check it against the contract.

    Args:
        reference: Registered name, described callable or SizingStrategy
        registry: Registry to resolve names in

    Returns:
        The validated strategy

    Raises:
        UndefinedStrategyError: If the reference does not resolve
        InvalidSignatureError: If the declared signature does not match
    """
    if reference is None:
        raise UndefinedStrategyError("invalid chunk sizing function")
    if isinstance(reference, str) and registry is None:
        raise UndefinedStrategyError(f"invalid chunk sizing function '{reference}'")

    strategy = (registry or StrategyRegistry()).resolve(reference)
    check_signature(strategy.descriptor)
    return strategy
