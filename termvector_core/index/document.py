"""TermVector Document Store - Stored Field Retrieval.

The document store keeps the original values of stored fields, keyed by
segment-local document number. Retrieval can be restricted to a field
selector so callers load only the fields they need.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class StoredDocument:
    """Stored field values of one document.

    Attributes:
        doc_id: Segment-local document number
        content: Field name -> stored values, in insertion order
    """

    doc_id: int
    content: Dict[str, List[Any]] = field(default_factory=dict)

    def add_value(self, field_name: str, value: Any) -> None:
        """Append a stored value to a field."""
        self.content.setdefault(field_name, []).append(value)

    def get(self, field_name: str, default: Any = None) -> Any:
        """Get the first stored value of a field."""
        values = self.content.get(field_name)
        return values[0] if values else default


class DocumentStore(ABC):
    """Abstract base class for stored field storage."""

    @abstractmethod
    def store(self, document: StoredDocument) -> None:
        """Store a document.

        Args:
            document: Document to store
        """
        pass

    @abstractmethod
    def get(self, doc_id: int) -> Optional[StoredDocument]:
        """Get a document by number.

        Args:
            doc_id: Document number

        Returns:
            Document or None
        """
        pass

    def get_fields(
        self,
        doc_id: int,
        selector: Optional[Iterable[str]] = None,
    ) -> Optional[StoredDocument]:
        """Load a document restricted to the selected fields.

        Args:
            doc_id: Document number
            selector: Field names to load; None loads every field

        Returns:
            A document holding only the selected fields, or None
        """
        doc = self.get(doc_id)
        if doc is None:
            return None
        if selector is None:
            return StoredDocument(doc_id, {k: list(v) for k, v in doc.content.items()})
        wanted = set(selector)
        return StoredDocument(
            doc_id,
            {k: list(v) for k, v in doc.content.items() if k in wanted},
        )


class InMemoryDocumentStore(DocumentStore):
    """In-memory document store."""

    def __init__(self):
        self._documents: Dict[int, StoredDocument] = {}
        self._lock = threading.RLock()

    def store(self, document: StoredDocument) -> None:
        with self._lock:
            self._documents[document.doc_id] = document

    def get(self, doc_id: int) -> Optional[StoredDocument]:
        return self._documents.get(doc_id)


__all__ = ["StoredDocument", "DocumentStore", "InMemoryDocumentStore"]
