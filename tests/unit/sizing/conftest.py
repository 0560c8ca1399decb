"""Shared fixtures for sizing tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from helpers import add_chunk, build_catalog

from laakhay.chunksizing.models import Chunk
from laakhay.chunksizing.sources import InMemoryCatalog


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return build_catalog()


@pytest.fixture
def chunk_factory(catalog: InMemoryCatalog) -> Callable[..., Chunk]:
    def _add(index: int, **kwargs) -> Chunk:
        return add_chunk(catalog, index, **kwargs)

    return _add
