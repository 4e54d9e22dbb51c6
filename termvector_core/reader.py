"""TermVector Reader - Index Snapshots and Reference Counting.

A reader is a point-in-time, read-only view over an index. Readers are
shared between concurrent requests and reference counted: each request
acquires the current reader, and the reader is closed once the last
holder releases it.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Dict, Generator, Iterable, Optional

if TYPE_CHECKING:
    from termvector_core.index.termvector import DocumentTermVector

logger = logging.getLogger(__name__)


class IndexReader(ABC):
    """Read-only access to one index snapshot.

    Document ids are only meaningful for the reader that produced them.
    """

    @abstractmethod
    def term_vector(self, doc_id: int) -> DocumentTermVector:
        """Get the recorded term vectors of a document.

        Raises:
            IndexAccessError: If the document cannot be read
        """
        pass

    @abstractmethod
    def stored_fields(
        self,
        doc_id: int,
        selector: Optional[Iterable[str]] = None,
    ) -> Dict[str, Any]:
        """Get stored field values of a document.

        Args:
            doc_id: Document id
            selector: Field names to load; None loads every stored field

        Returns:
            Field name -> first stored value, restricted to the selector

        Raises:
            IndexAccessError: If the document cannot be read
        """
        pass

    @abstractmethod
    def document_frequency(self, field: str, term: str) -> Optional[int]:
        """Number of documents containing a term in a field.

        Returns:
            The count, or None if the term is not in the dictionary

        Raises:
            IndexAccessError: If the term dictionary cannot be read
        """
        pass

    @property
    @abstractmethod
    def max_doc(self) -> int:
        """One greater than the largest document id."""
        pass

    def close(self) -> None:
        pass


class RefCounted:
    """Reference counted holder for a reader.

    The reader is closed when the count drops to zero.
    """

    def __init__(
        self,
        resource: IndexReader,
        on_close: Optional[Callable[[IndexReader], None]] = None,
    ):
        """Initialize holder with a count of one.

        Args:
            resource: The reader
            on_close: Called after the reader is closed
        """
        self._resource = resource
        self._on_close = on_close
        self._refcount = 1
        self._lock = threading.RLock()

    def get(self) -> IndexReader:
        return self._resource

    @property
    def refcount(self) -> int:
        return self._refcount

    def incref(self) -> None:
        with self._lock:
            if self._refcount <= 0:
                raise RuntimeError("Reader is already closed")
            self._refcount += 1

    def decref(self) -> None:
        with self._lock:
            if self._refcount <= 0:
                raise RuntimeError("Reader released more times than acquired")
            self._refcount -= 1
            closing = self._refcount == 0
        if closing:
            self._resource.close()
            logger.debug(f"Closed reader {self._resource!r}")
            if self._on_close:
                self._on_close(self._resource)


class SearcherManager:
    """Hands out the current reader and swaps in new ones.

    The manager holds its own reference to the current reader. Opening a
    new reader drops that reference, so the old one stays alive only as
    long as in-flight requests still hold it.
    """

    def __init__(self, opener: Callable[[], IndexReader]):
        """Initialize manager and open the first reader.

        Args:
            opener: Builds a reader over the latest committed snapshot
        """
        self._opener = opener
        self._lock = threading.RLock()
        self._current: RefCounted = RefCounted(opener())
        self._generation = 0

    def get_searcher(self) -> RefCounted:
        """Acquire the current reader. The caller must ``decref`` it."""
        with self._lock:
            self._current.incref()
            return self._current

    @contextmanager
    def acquire(self) -> Generator[IndexReader, None, None]:
        """Scoped acquisition of the current reader.

        The reference is released on every exit path.
        """
        holder = self.get_searcher()
        try:
            yield holder.get()
        finally:
            holder.decref()

    def reopen(self) -> None:
        """Open a reader over the latest snapshot and retire the old one."""
        with self._lock:
            previous = self._current
            self._current = RefCounted(self._opener())
            self._generation += 1
        logger.info(f"Opened reader generation {self._generation}")
        previous.decref()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current(self) -> RefCounted:
        """Current holder, without acquiring it."""
        return self._current

    def close(self) -> None:
        with self._lock:
            self._current.decref()


__all__ = ["IndexReader", "RefCounted", "SearcherManager"]
