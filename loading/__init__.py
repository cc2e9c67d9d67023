"""Chunked loading of large plain-text files: decode, normalize, slice and cache."""

from .cache import ChunkCache
from .config import ReaderConfig
from .decoder import DecodeResult, decode, decode_bytes
from .models import Document, ReaderError, ReaderState, SourceUnavailableError
from .normalizer import NormalizationConfig, NormalizationResult, TextNormalizer, normalize_text
from .sources import ByteSource, FileByteSource, MemoryByteSource
from .store import ChunkStore

__all__ = [
    "ByteSource",
    "ChunkCache",
    "ChunkStore",
    "DecodeResult",
    "Document",
    "FileByteSource",
    "MemoryByteSource",
    "NormalizationConfig",
    "NormalizationResult",
    "ReaderConfig",
    "ReaderError",
    "ReaderState",
    "SourceUnavailableError",
    "TextNormalizer",
    "decode",
    "decode_bytes",
    "normalize_text",
]
