"""Host configuration backed by a mapping or the process environment."""

from __future__ import annotations

import os
from collections.abc import Mapping

import psutil

from ..core.exceptions import MissingConfigError
from .base import HostConfigSource

# Environment variables are read as <ENV_PREFIX><KEY>, e.g.
# LAAKHAY_CHUNKSIZING_SHARED_BUFFERS=128MB
ENV_PREFIX = "LAAKHAY_CHUNKSIZING_"


class StaticHostConfig(HostConfigSource):
    """Host settings from a fixed mapping.

    Physical memory is read from the running host with psutil unless an
    explicit value is given, which keeps estimates reproducible in tests.
    """

    def __init__(
        self,
        settings: Mapping[str, str] | None = None,
        *,
        physical_memory_bytes: int | None = None,
    ) -> None:
        self._settings = {key.lower(): value for key, value in (settings or {}).items()}
        self._physical_memory_bytes = physical_memory_bytes

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        prefix: str = ENV_PREFIX,
        physical_memory_bytes: int | None = None,
    ) -> StaticHostConfig:
        """Build host settings from prefixed environment variables."""
        source = os.environ if environ is None else environ
        settings = {
            key[len(prefix) :].lower(): value
            for key, value in source.items()
            if key.startswith(prefix) and len(key) > len(prefix)
        }
        return cls(settings, physical_memory_bytes=physical_memory_bytes)

    def read_host_config(self, key: str) -> str:
        value = self._settings.get(key.lower())
        if value is None:
            raise MissingConfigError(f"missing configuration for '{key}'", key=key)
        return value

    def read_physical_memory_bytes(self) -> int:
        if self._physical_memory_bytes is not None:
            return self._physical_memory_bytes
        return int(psutil.virtual_memory().total)
