"""Byte sources consumed by the chunk store.

Any object with ``read_bytes()`` and ``describe()`` is a ByteSource, so hosts
can hand in their own readers (sandboxed file handles, bundled assets) without
inheriting from anything here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union, runtime_checkable

from .models import SourceUnavailableError

logger = logging.getLogger(__name__)


@runtime_checkable
class ByteSource(Protocol):
    """Read-only provider of the full byte content of one file."""

    def read_bytes(self) -> bytes:
        """Return the full content.

        Raises:
            SourceUnavailableError: If the content cannot be read.
        """
        ...

    def describe(self) -> str:
        """Short human-readable reference used in logs."""
        ...


@dataclass(frozen=True)
class FileByteSource:
    """ByteSource backed by a file on disk."""

    path: Path

    def read_bytes(self) -> bytes:
        try:
            data = self.path.read_bytes()
        except FileNotFoundError as e:
            raise SourceUnavailableError(f"File not found: {self.path}", str(self.path)) from e
        except OSError as e:
            raise SourceUnavailableError(f"{e.strerror or e}: {self.path}", str(self.path)) from e
        logger.info("File size: %d bytes (%s)", len(data), self.path)
        return data

    def describe(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class MemoryByteSource:
    """ByteSource over an in-memory buffer."""

    data: bytes
    name: str = "<memory>"

    def read_bytes(self) -> bytes:
        return self.data

    def describe(self) -> str:
        return self.name


def as_byte_source(source: Union[ByteSource, str, Path]) -> ByteSource:
    """Wrap a path in a FileByteSource; pass ByteSource objects through."""
    if isinstance(source, (str, Path)):
        return FileByteSource(Path(source))
    if isinstance(source, ByteSource):
        return source
    raise TypeError(f"Expected a ByteSource or path, got {type(source).__name__}")
