"""TermVector Index Core - Schema, Writer and Searcher in One Place.

An IndexCore owns one index: it analyzes and buffers new documents,
commits them into sealed segments, and hands out reference counted
readers over the latest commit.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterable, Optional

from termvector_core.config import IndexConfig
from termvector_core.index.segment import SegmentReader, SegmentWriter
from termvector_core.reader import IndexReader, SearcherManager
from termvector_core.schema import IndexSchema

logger = logging.getLogger(__name__)


class IndexCore:
    """A single index with its schema and searcher manager."""

    def __init__(self, schema: IndexSchema, config: Optional[IndexConfig] = None):
        """Initialize core with an empty committed snapshot.

        Args:
            schema: Index schema
            config: Core configuration
        """
        self.schema = schema
        self.config = config or IndexConfig()
        self._writer = SegmentWriter(
            schema,
            max_docs_per_segment=self.config.max_docs_per_segment,
            default_analyzer=self.config.default_analyzer,
        )
        self._lock = threading.RLock()
        self._pending = 0
        self.searcher_manager = SearcherManager(self._open_reader)
        logger.info(f"Initialized index core: {self.config.name}")

    @property
    def name(self) -> str:
        return self.config.name

    def _open_reader(self) -> IndexReader:
        return SegmentReader(self._writer.flush())

    def add_document(self, fields: Dict[str, Any]) -> None:
        """Buffer a document. It becomes visible after ``commit``.

        Raises:
            ValueError: If the document does not match the schema
        """
        with self._lock:
            key = fields.get(self.schema.unique_key_field_name)
            if key is None:
                raise ValueError(
                    f"Document is missing unique key '{self.schema.unique_key_field_name}'"
                )
            self._writer.add_document(fields)
            self._pending += 1

    def add_documents(self, documents: Iterable[Dict[str, Any]]) -> None:
        for fields in documents:
            self.add_document(fields)

    def commit(self) -> None:
        """Make buffered documents visible to new readers."""
        with self._lock:
            self.searcher_manager.reopen()
            logger.info(f"Committed {self._pending} documents to {self.name}")
            self._pending = 0

    def lookup_doc_id(self, unique_key: Any) -> Optional[int]:
        """Document id of a unique key in the current snapshot."""
        key_field = self.schema.unique_key_field_name
        with self.searcher_manager.acquire() as reader:
            for doc_id in range(reader.max_doc):
                if reader.stored_fields(doc_id, (key_field,)).get(key_field) == unique_key:
                    return doc_id
        return None

    def close(self) -> None:
        self.searcher_manager.close()
        logger.info(f"Closed index core: {self.name}")


__all__ = ["IndexCore"]
