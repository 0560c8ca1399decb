"""Target chunk size estimation from host memory configuration.

The cache memory available to the engine is the combination of its own
shared buffer cache and the OS file system cache. The ``effective_cache_size``
setting is meant to estimate that combined cache and is the best value to
use when set accurately. A conservative ``effective_cache_size`` is typically
half the memory of the system, while ``shared_buffers`` is commonly a quarter
of it. If ``shared_buffers`` is set higher than ``effective_cache_size`` we use
the larger of the two, and the result is bounded by half of physical memory:

    shared_buffers <= effective_memory_cache <= system_memory / 2

The target chunk size is a quarter of that, so that about four chunks can be
held in cache at the same time.
"""

from __future__ import annotations

import re
from dataclasses import replace

from ..core.enums import INT32_MAX, INT32_MIN
from ..core.exceptions import InvalidConfigError, MissingConfigError
from ..sources.base import HostConfigSource
from .config import (
    BLOCK_SIZE,
    EFFECTIVE_CACHE_SIZE_KEY,
    SHARED_BUFFERS_KEY,
    MemoryBudgetContext,
)
from .telemetry import log_target_size

DISABLE_DIRECTIVES = frozenset({"off", "disable"})
ESTIMATE_DIRECTIVE = "estimate"

_UNIT_BYTES = {
    "kB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}
_UNITS_HINT = 'Valid units for this parameter are "kB", "MB", "GB", and "TB".'
_AMOUNT_RE = re.compile(r"^\s*([+-]?\d+)\s*([A-Za-z]*)\s*$")


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // denominator
    return -quotient if numerator < 0 else quotient


def parse_block_count(amount: str, block_size: int = BLOCK_SIZE) -> int:
    """Parse a memory amount into a number of blocks.

    A bare integer is a number of blocks. An integer followed by a unit
    (kB, MB, GB or TB) is converted to whole blocks, truncating.

    Args:
        amount: Text such as "1024", "128MB" or "4 GB"
        block_size: Block size in bytes

    Returns:
        Number of blocks

    Raises:
        InvalidConfigError: If the text is not a valid amount or overflows
    """
    match = _AMOUNT_RE.match(amount)
    if match is None:
        raise InvalidConfigError("invalid data amount", hint=f'invalid value "{amount}"')

    value = int(match.group(1))
    unit = match.group(2)
    if unit:
        if unit not in _UNIT_BYTES:
            raise InvalidConfigError("invalid data amount", hint=_UNITS_HINT)
        blocks = _trunc_div(value * _UNIT_BYTES[unit], block_size)
    else:
        blocks = value

    if not INT32_MIN <= blocks <= INT32_MAX:
        raise InvalidConfigError(
            "invalid data amount",
            hint=f'value "{amount}" is out of range',
        )
    return blocks


def parse_memory_amount(amount: str | None, block_size: int = BLOCK_SIZE) -> int:
    """Parse a memory amount into bytes.

    Raises:
        InvalidConfigError: If the amount is missing or invalid
    """
    if amount is None:
        raise InvalidConfigError("invalid memory amount")
    return parse_block_count(amount, block_size) * block_size


class MemoryBudgetEstimator:
    """Derives a target chunk size in bytes from a directive.

    Host settings and physical memory are read on every call; nothing is
    cached between calls except the test override held in the context.
    """

    def __init__(
        self,
        host: HostConfigSource,
        context: MemoryBudgetContext | None = None,
    ) -> None:
        """Initialize the estimator.

        Args:
            host: Source of host settings and physical memory
            context: Block size, cache share and optional test override
        """
        self._host = host
        self._context = context or MemoryBudgetContext()

    @property
    def context(self) -> MemoryBudgetContext:
        return self._context

    def set_test_override(self, amount: str | int | None) -> int:
        """Fix the result of the "estimate" directive.

        Only for single-threaded test harnesses: the override is instance
        state and is not synchronized.

        Args:
            amount: Memory amount text, a byte count, or None to clear

        Returns:
            The override in bytes (-1 when cleared)
        """
        if amount is None:
            self._context = replace(self._context, fixed_effective_cache_size=None)
            return -1
        if isinstance(amount, str):
            override = parse_memory_amount(amount, self._context.block_size)
        else:
            override = amount
        self._context = replace(self._context, fixed_effective_cache_size=override)
        return override

    def _read_setting_blocks(self, key: str) -> int:
        value = self._host.read_host_config(key)
        try:
            return parse_block_count(value, self._context.block_size)
        except InvalidConfigError as exc:
            raise MissingConfigError(
                f"could not parse '{key}' setting", key=key, hint=exc.hint
            ) from exc

    def estimate_effective_cache_size(self) -> int:
        """Estimate the memory available for caching, in bytes.

        Raises:
            MissingConfigError: If a cache setting is absent or unparseable
        """
        sysmem_bound_bytes = self._host.read_physical_memory_bytes() // 2
        shared_buffers = self._read_setting_blocks(SHARED_BUFFERS_KEY)
        effective_cache_size = self._read_setting_blocks(EFFECTIVE_CACHE_SIZE_KEY)

        memory_bytes = max(shared_buffers, effective_cache_size) * self._context.block_size
        return min(memory_bytes, sysmem_bound_bytes)

    def calculate_initial_target_size(self) -> int:
        """Share of the effective cache one chunk may use.

        A positive test override is returned as-is, without reading the host.
        """
        override = self._context.fixed_effective_cache_size
        if override is not None and override > 0:
            return override
        return self.estimate_effective_cache_size() // self._context.chunks_in_cache

    def estimate_target_size(self, directive: str | None) -> int:
        """Resolve a target size directive into bytes.

        Args:
            directive: "off"/"disable", "estimate" or an explicit memory amount.
                None disables adaptive sizing.

        Returns:
            Target size in bytes; 0 means adaptive sizing is disabled

        Raises:
            InvalidConfigError: If an explicit amount cannot be parsed
            MissingConfigError: If "estimate" cannot read the host settings
        """
        if directive is None:
            return 0

        normalized = directive.strip().lower()
        if normalized in DISABLE_DIRECTIVES:
            target_size_bytes = 0
        elif normalized == ESTIMATE_DIRECTIVE:
            target_size_bytes = self.calculate_initial_target_size()
        else:
            target_size_bytes = parse_memory_amount(directive, self._context.block_size)

        if target_size_bytes <= 0:
            target_size_bytes = 0

        log_target_size(directive=directive, target_size_bytes=target_size_bytes)
        return target_size_bytes


def estimate_target_size(
    directive: str | None,
    host: HostConfigSource,
    context: MemoryBudgetContext | None = None,
) -> int:
    """Resolve a target size directive with a one-off estimator."""
    return MemoryBudgetEstimator(host, context).estimate_target_size(directive)
