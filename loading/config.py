from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .cache import DEFAULT_CACHE_SIZE
from .chunker import DEFAULT_CHUNK_SIZE

DEFAULT_MAX_WORKERS = 2
DEFAULT_LIBRARY_PATH = Path("data/library.json")


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass
class ReaderConfig:
    """Configuration for the chunk store and the novel library.

    Attributes:
        chunk_size: Characters per chunk.
        cache_size: Maximum number of chunks kept in memory.
        max_workers: Worker threads used for reading and decoding.
        library_path: JSON file holding the novel library.
        normalization_config: Optional YAML file with normalization flags.
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    cache_size: int = DEFAULT_CACHE_SIZE
    max_workers: int = DEFAULT_MAX_WORKERS
    library_path: Path = DEFAULT_LIBRARY_PATH
    normalization_config: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive.")
        if self.cache_size <= 0:
            raise ValueError("cache_size must be positive.")
        if self.max_workers <= 0:
            raise ValueError("max_workers must be positive.")

    @classmethod
    def from_env(cls) -> "ReaderConfig":
        """Create config from environment variables."""
        normalization_config = os.getenv("READER_NORMALIZE_CONFIG")
        return cls(
            chunk_size=_int_from_env("READER_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            cache_size=_int_from_env("READER_CACHE_SIZE", DEFAULT_CACHE_SIZE),
            max_workers=_int_from_env("READER_MAX_WORKERS", DEFAULT_MAX_WORKERS),
            library_path=Path(os.getenv("READER_LIBRARY_PATH", str(DEFAULT_LIBRARY_PATH))),
            normalization_config=Path(normalization_config) if normalization_config else None,
        )
