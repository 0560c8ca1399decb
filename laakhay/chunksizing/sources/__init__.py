"""Collaborator interfaces and their in-process implementations."""

from .base import CatalogSource, ChunkDataSource, HostConfigSource
from .host import ENV_PREFIX, StaticHostConfig
from .memory import InMemoryCatalog

__all__ = [
    "CatalogSource",
    "ChunkDataSource",
    "HostConfigSource",
    "ENV_PREFIX",
    "InMemoryCatalog",
    "StaticHostConfig",
]
