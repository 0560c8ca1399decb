"""Data models."""

from .chunk import Chunk, ChunkSample
from .dimension import DimensionInfo, DimensionSlice
from .sizing_info import ChunkSizingInfo, HypertableInfo

__all__ = [
    "Chunk",
    "ChunkSample",
    "ChunkSizingInfo",
    "DimensionInfo",
    "DimensionSlice",
    "HypertableInfo",
]
