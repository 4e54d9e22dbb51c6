"""TermVector Segment Management - Index Segments and Segment Readers.

Segments are immutable chunks of the index. A segment accepts documents
while building and is sealed before it becomes visible to readers. A
SegmentReader presents a list of sealed segments as one snapshot with
contiguous document ids.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import bisect
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from termvector_core.analyzers import Token, TokenStream
from termvector_core.errors import IndexAccessError
from termvector_core.index.document import InMemoryDocumentStore, StoredDocument
from termvector_core.index.inverted import InvertedIndex, TermDictionary
from termvector_core.index.termvector import DocumentTermVector, FieldTermVector
from termvector_core.reader import IndexReader
from termvector_core.schema import FieldMapping, IndexSchema

logger = logging.getLogger(__name__)

# Position gap between values of a multi-valued field
POSITION_INCREMENT_GAP = 100


class SegmentState(Enum):
    """Segment state enumeration."""

    BUILDING = auto()  # Accepting new documents
    SEALED = auto()  # Immutable, visible to readers


@dataclass
class SegmentInfo:
    """Metadata about a segment.

    Attributes:
        segment_id: Unique segment identifier
        name: Human-readable segment name
        doc_count: Number of documents
        created_at: Creation timestamp
        sealed_at: Seal timestamp
        state: Current segment state
        fields: Fields seen in this segment
    """

    segment_id: str
    name: str = ""
    doc_count: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    sealed_at: Optional[datetime] = None
    state: SegmentState = SegmentState.BUILDING
    fields: Set[str] = field(default_factory=set)

    def __post_init__(self):
        if not self.name:
            self.name = f"seg_{self.segment_id[:8]}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segment_id": self.segment_id,
            "name": self.name,
            "doc_count": self.doc_count,
            "created_at": self.created_at.isoformat(),
            "sealed_at": self.sealed_at.isoformat() if self.sealed_at else None,
            "state": self.state.name,
            "fields": sorted(self.fields),
        }


def join_values(streams: List[TokenStream], text_lengths: List[int]) -> TokenStream:
    """Join the token streams of a multi-valued field into one stream.

    Positions of each value start after the previous value plus a gap;
    offsets are shifted by the length of the preceding values.
    """
    joined = TokenStream()
    position_base = 0
    offset_base = 0
    for stream, length in zip(streams, text_lengths):
        last_position = -1
        for token in stream:
            joined.add(Token(
                text=token.text,
                position=position_base + token.position,
                start_offset=offset_base + token.start_offset,
                end_offset=offset_base + token.end_offset,
            ))
            last_position = max(last_position, token.position)
        if last_position >= 0:
            position_base += last_position + 1 + POSITION_INCREMENT_GAP
        offset_base += length
    return joined


class Segment:
    """A segment of the index.

    Each segment has its own inverted index per field, its own stored
    fields and term vectors, and numbers its documents from zero.
    """

    def __init__(
        self,
        schema: IndexSchema,
        segment_id: Optional[str] = None,
        default_analyzer: str = "standard",
    ):
        """Initialize segment.

        Args:
            schema: Index schema
            segment_id: Unique segment ID
            default_analyzer: Analyzer for text fields without one
        """
        self.schema = schema
        self.segment_id = segment_id or str(uuid.uuid4())
        self.default_analyzer = default_analyzer
        self.info = SegmentInfo(segment_id=self.segment_id)

        self._term_dictionary = TermDictionary()
        self._inverted_indices: Dict[str, InvertedIndex] = {}
        self._documents = InMemoryDocumentStore()
        self._term_vectors: List[DocumentTermVector] = []
        self._lock = threading.RLock()

    def add_document(self, fields: Dict[str, Any]) -> int:
        """Analyze and add a document.

        Args:
            fields: Field name -> value or list of values

        Returns:
            Segment-local document number

        Raises:
            ValueError: If the segment is sealed or a field is unknown
            KeyError: If a field names an unknown analyzer
        """
        with self._lock:
            if self.info.state != SegmentState.BUILDING:
                raise ValueError(f"Cannot add to segment in state {self.info.state.name}")

            # Nothing is written until every field has been analyzed
            analyzed: List[Tuple[FieldMapping, List[Any], Optional[TokenStream]]] = []
            for name, value in fields.items():
                mapping = self.schema.get_field(name)
                if mapping is None:
                    raise ValueError(f"Unknown field: {name}")
                values = list(value) if isinstance(value, (list, tuple)) else [value]
                if len(values) > 1 and not mapping.multi_valued:
                    raise ValueError(f"Field '{name}' is not multi-valued")
                values = [v for v in values if v is not None]

                stream = None
                texts = [str(v) for v in values]
                if texts and (mapping.indexed or mapping.term_vectors):
                    analyzer = mapping.get_analyzer(self.default_analyzer)
                    stream = join_values(
                        [analyzer.analyze(text) for text in texts],
                        [len(text) for text in texts],
                    )
                analyzed.append((mapping, values, stream))

            doc_id = len(self._term_vectors)
            stored = StoredDocument(doc_id)
            vectors: List[FieldTermVector] = []

            for mapping, values, stream in analyzed:
                name = mapping.name
                if mapping.stored:
                    for v in values:
                        stored.add_value(name, v)
                if not stream:
                    continue

                if mapping.indexed:
                    index = self._inverted_indices.get(name)
                    if index is None:
                        index = InvertedIndex(name, term_dictionary=self._term_dictionary)
                        self._inverted_indices[name] = index
                    index.index_document(doc_id, stream)

                if mapping.term_vectors:
                    vectors.append(FieldTermVector.from_tokens(
                        name,
                        stream,
                        store_positions=mapping.term_positions,
                        store_offsets=mapping.term_offsets,
                    ))
                self.info.fields.add(name)

            self._documents.store(stored)
            self._term_vectors.append(DocumentTermVector(doc_id, tuple(vectors)))
            self.info.doc_count = len(self._term_vectors)
            return doc_id

    def seal(self) -> None:
        """Seal segment to prevent further modifications."""
        with self._lock:
            if self.info.state == SegmentState.BUILDING:
                self.info.state = SegmentState.SEALED
                self.info.sealed_at = datetime.now()

    @property
    def is_sealed(self) -> bool:
        return self.info.state == SegmentState.SEALED

    @property
    def doc_count(self) -> int:
        return self.info.doc_count

    def get_inverted_index(self, field: str) -> Optional[InvertedIndex]:
        return self._inverted_indices.get(field)

    def get_term_vector(self, doc_id: int) -> DocumentTermVector:
        return self._term_vectors[doc_id]

    def get_stored(
        self,
        doc_id: int,
        selector: Optional[Iterable[str]] = None,
    ) -> Optional[StoredDocument]:
        return self._documents.get_fields(doc_id, selector)

    def get_stats(self) -> Dict[str, Any]:
        """Get segment statistics."""
        return {
            **self.info.to_dict(),
            "term_count": self._term_dictionary.term_count(),
            "indices": {
                name: index.get_stats()
                for name, index in self._inverted_indices.items()
            },
        }


class SegmentReader(IndexReader):
    """Reads a list of sealed segments as a single snapshot.

    Document ids are assigned by stacking segments in order: the first
    document of each segment follows the last document of the previous one.
    """

    def __init__(self, segments: List[Segment]):
        """Initialize reader.

        Args:
            segments: Segments to read from; unsealed segments are skipped
        """
        self._segments = [s for s in segments if s.is_sealed]
        self._doc_bases: List[int] = []
        base = 0
        for segment in self._segments:
            self._doc_bases.append(base)
            base += segment.doc_count
        self._max_doc = base
        self._closed = False

    def _locate(self, doc_id: int) -> Tuple[Segment, int]:
        """Resolve a document id to its segment and local number."""
        if self._closed:
            raise IndexAccessError("Reader is closed")
        if not isinstance(doc_id, int) or doc_id < 0 or doc_id >= self._max_doc:
            raise IndexAccessError(f"Document id {doc_id} is out of range (maxDoc={self._max_doc})")
        idx = bisect.bisect_right(self._doc_bases, doc_id) - 1
        return self._segments[idx], doc_id - self._doc_bases[idx]

    def term_vector(self, doc_id: int) -> DocumentTermVector:
        segment, local = self._locate(doc_id)
        vector = segment.get_term_vector(local)
        return DocumentTermVector(doc_id, vector.fields)

    def stored_fields(
        self,
        doc_id: int,
        selector: Optional[Iterable[str]] = None,
    ) -> Dict[str, Any]:
        segment, local = self._locate(doc_id)
        stored = segment.get_stored(local, selector)
        if stored is None:
            raise IndexAccessError(f"No stored fields for document {doc_id}")
        return {name: stored.get(name) for name, values in stored.content.items() if values}

    def document_frequency(self, field: str, term: str) -> Optional[int]:
        """Sum of the term's document frequency across segments."""
        if self._closed:
            raise IndexAccessError("Reader is closed")
        found = False
        total = 0
        for segment in self._segments:
            index = segment.get_inverted_index(field)
            if index is None:
                continue
            df = index.get_document_frequency(term)
            if df:
                found = True
                total += df
        return total if found else None

    @property
    def max_doc(self) -> int:
        return self._max_doc

    @property
    def segment_count(self) -> int:
        return len(self._segments)

    def close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return f"SegmentReader(segments={len(self._segments)}, maxDoc={self._max_doc})"


class SegmentWriter:
    """Writes to an active segment, rolling to a new one when full."""

    def __init__(
        self,
        schema: IndexSchema,
        max_docs_per_segment: int = 100000,
        default_analyzer: str = "standard",
    ):
        """Initialize writer.

        Args:
            schema: Index schema
            max_docs_per_segment: Maximum documents per segment
            default_analyzer: Analyzer for text fields without one
        """
        self.schema = schema
        self.max_docs_per_segment = max_docs_per_segment
        self.default_analyzer = default_analyzer

        self._current_segment: Optional[Segment] = None
        self._segments: List[Segment] = []
        self._lock = threading.RLock()

    def _get_current_segment(self) -> Segment:
        if (self._current_segment is None or
                self._current_segment.doc_count >= self.max_docs_per_segment):
            if self._current_segment is not None:
                self._current_segment.seal()
            self._current_segment = Segment(
                self.schema, default_analyzer=self.default_analyzer
            )
            self._segments.append(self._current_segment)
        return self._current_segment

    def add_document(self, fields: Dict[str, Any]) -> None:
        """Add a document to the current segment."""
        with self._lock:
            self._get_current_segment().add_document(fields)

    def flush(self) -> List[Segment]:
        """Seal the current segment and return all sealed segments."""
        with self._lock:
            if self._current_segment is not None:
                self._current_segment.seal()
                logger.debug(f"Sealed segment {self._current_segment.info.name} "
                             f"({self._current_segment.doc_count} docs)")
                self._current_segment = None
            return [s for s in self._segments if s.is_sealed]


__all__ = [
    "Segment",
    "SegmentInfo",
    "SegmentState",
    "SegmentReader",
    "SegmentWriter",
    "join_values",
    "POSITION_INCREMENT_GAP",
]
