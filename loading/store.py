"""Chunk store: loads a text file in the background and serves it chunk by chunk."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, Union

from .cache import ChunkCache
from .chunker import slice_chunk
from .config import ReaderConfig
from .decoder import decode
from .models import Document, ReaderState, SourceUnavailableError
from .normalizer import TextNormalizer
from .sources import ByteSource, as_byte_source

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Callable[[], None]], None]
Subscriber = Callable[[ReaderState], None]


def run_inline(callback: Callable[[], None]) -> None:
    """Default dispatcher: publish on whichever thread finished the work."""
    callback()


class ChunkStore:
    """Owns one open document and publishes the visible chunk.

    Reading, decoding and normalizing run on a worker pool. Completions are
    handed to ``dispatcher`` so a host can publish on its own UI thread; all
    state changes happen under a single lock. Every ``load`` and ``close``
    bumps a generation counter, and a completion whose generation is no
    longer current is discarded.

    Subscribers receive a ReaderState after every change. They are called
    with the store lock held and must not block on other threads that use
    the store.
    """

    def __init__(
        self,
        config: Optional[ReaderConfig] = None,
        normalizer: Optional[TextNormalizer] = None,
        executor: Optional[Executor] = None,
        dispatcher: Optional[Dispatcher] = None,
    ):
        self.config = config or ReaderConfig()
        if normalizer is None:
            if self.config.normalization_config is not None:
                normalizer = TextNormalizer.from_yaml(self.config.normalization_config)
            else:
                normalizer = TextNormalizer()
        self.normalizer = normalizer

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="chunk-loader",
        )
        self._dispatch = dispatcher or run_inline

        self._lock = threading.RLock()
        self._cache = ChunkCache(self.config.cache_size)
        self._subscribers: List[Subscriber] = []
        self._document: Optional[Document] = None
        self._content = ""
        self._current_chunk = 0
        self._is_loading = False
        self._error: Optional[str] = None
        self._generation = 0

    # Observable state

    @property
    def state(self) -> ReaderState:
        with self._lock:
            return ReaderState(
                content=self._content,
                is_loading=self._is_loading,
                error=self._error,
                chunk_index=self._current_chunk,
                total_chunks=self.total_chunks,
                generation=self._generation,
            )

    @property
    def document(self) -> Optional[Document]:
        return self._document

    @property
    def content(self) -> str:
        return self._content

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def current_chunk_index(self) -> int:
        return self._current_chunk

    @property
    def total_chunks(self) -> int:
        document = self._document
        return document.total_chunks if document is not None else 0

    def cached_indices(self) -> List[int]:
        with self._lock:
            return self._cache.indices()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for state changes.

        Returns:
            A function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        state = self.state
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:  # pylint: disable=broad-except
                logger.exception("State subscriber %r failed", callback)

    # Loading

    def load(self, source: Union[ByteSource, str, Path]) -> "Future[Optional[ReaderState]]":
        """Start loading a file; any earlier load becomes stale.

        Args:
            source: A ByteSource, or a path to read from disk.

        Returns:
            Future resolving to the published ReaderState once chunk 0 (or
            the error) is visible, or to None if this load was superseded.
        """
        byte_source = as_byte_source(source)
        future: Future = Future()

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._document = None
            self._cache.clear()
            self._content = ""
            self._current_chunk = 0
            self._is_loading = True
            self._error = None
            self._publish()

        logger.info("Loading %s (generation %d)", byte_source.describe(), generation)
        try:
            self._executor.submit(self._prepare, byte_source, generation, future)
        except RuntimeError as e:
            logger.error("Could not schedule load of %s: %s", byte_source.describe(), e)
            self._fail_load(generation, f"Failed to open file: {e}", future)
        return future

    def _prepare(self, source: ByteSource, generation: int, future: Future) -> None:
        """Read, decode and normalize on a worker thread."""
        name = source.describe()
        try:
            data = source.read_bytes()
            decoded = decode(data)
            normalized = self.normalizer.normalize(decoded.text)
            document = Document(
                text=normalized.text,
                source=name,
                encoding=decoded.encoding,
                used_fallback=decoded.used_fallback,
                chunk_size=self.config.chunk_size,
                metadata={
                    "size_bytes": len(data),
                    "decoded_length": normalized.original_length,
                    "rules_applied": normalized.rules_applied,
                },
            )
        except (SourceUnavailableError, OSError) as e:
            logger.error("Failed to open %s: %s", name, e)
            message = f"Failed to open file: {e}"
            self._dispatch(lambda: self._fail_load(generation, message, future))
            return
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("Failed to prepare %s", name)
            message = f"Failed to open file: {e}"
            self._dispatch(lambda: self._fail_load(generation, message, future))
            return

        logger.info(
            "Prepared %s: %d chars, %d chunks, encoding=%s",
            name,
            document.length,
            document.total_chunks,
            document.encoding,
        )
        self._dispatch(lambda: self._finish_load(generation, document, future))

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.info("Discarding stale load (generation %d, current %d)", generation, self._generation)
            return True
        return False

    def _finish_load(self, generation: int, document: Document, future: Future) -> None:
        with self._lock:
            if self._is_stale(generation):
                state = None
            else:
                self._document = document
                self._cache.clear()
                self._current_chunk = 0
                if not self._load_chunk_locked(0):
                    # Empty document: nothing to show, but loading is over.
                    self._content = ""
                    self._is_loading = False
                    self._publish()
                state = self.state
        future.set_result(state)

    def _fail_load(self, generation: int, message: str, future: Future) -> None:
        with self._lock:
            if self._is_stale(generation):
                state = None
            else:
                self._document = None
                self._error = message
                self._is_loading = False
                self._publish()
                state = self.state
        future.set_result(state)

    # Navigation

    def load_chunk(self, index: int, generation: Optional[int] = None) -> bool:
        """Make chunk ``index`` visible.

        Args:
            index: Chunk index to show.
            generation: If given, only act when it is still the current load
                generation.

        Returns:
            True if the chunk was published, False for a no-op (nothing
            loaded, index out of range, or stale generation).
        """
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            return self._load_chunk_locked(index)

    def _load_chunk_locked(self, index: int) -> bool:
        document = self._document
        if document is None or not 0 <= index < document.total_chunks:
            logger.debug("Ignoring request for chunk %d", index)
            return False

        content = self._cache.get(index)
        if content is None:
            content = slice_chunk(document.text, index, document.chunk_size)
            self._cache.put(index, content)

        self._content = content
        self._current_chunk = index
        self._is_loading = False
        self._publish()
        return True

    def next_chunk(self) -> bool:
        with self._lock:
            if self._current_chunk >= self.total_chunks - 1:
                return False
            return self._load_chunk_locked(self._current_chunk + 1)

    def previous_chunk(self) -> bool:
        with self._lock:
            if self._current_chunk <= 0:
                return False
            return self._load_chunk_locked(self._current_chunk - 1)

    def progress(self) -> float:
        """Fraction of the document reached, in ``[0, 1]``."""
        with self._lock:
            total = self.total_chunks
            if total <= 1:
                return 0.0
            return self._current_chunk / (total - 1)

    # Lifecycle

    def close(self) -> None:
        """Drop the document and cache; late load completions become no-ops."""
        with self._lock:
            unloaded = (
                self._document is None
                and not self._is_loading
                and not self._content
                and self._error is None
                and not self._cache
            )
            if unloaded:
                return
            self._generation += 1
            self._document = None
            self._cache.clear()
            self._content = ""
            self._current_chunk = 0
            self._is_loading = False
            self._error = None
            self._publish()
        logger.debug("Closed chunk store")

    def shutdown(self, wait: bool = True) -> None:
        """Close the store and stop the worker pool if the store created it."""
        self.close()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ChunkStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
