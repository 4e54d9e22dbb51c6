"""TermVector Extractor - Per-Term Statistics from Term Vectors.

Walks a document's recorded term vectors field by field and term by term,
producing only the statistics a request asked for.

Document frequency is the raw number of documents containing a term in a
field. The "tf-idf" value is frequency divided by that count. Neither is
a logarithmic or normalized relevance score.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generator, Optional, Tuple

from termvector_core.index.termvector import FieldTermVector
from termvector_core.options import TermVectorOptions
from termvector_core.reader import IndexReader

logger = logging.getLogger(__name__)

# Document frequency reported for a term missing from the term dictionary
MIN_DOCUMENT_FREQUENCY = 1


@dataclass(frozen=True)
class TermLookupKey:
    """Term dictionary lookup bound to one field."""

    field: str

    def document_frequency(self, reader: IndexReader, term: str) -> int:
        """Document frequency of the term, never below one."""
        df = reader.document_frequency(self.field, term)
        if df is None or df < MIN_DOCUMENT_FREQUENCY:
            return MIN_DOCUMENT_FREQUENCY
        return df


@dataclass(frozen=True)
class TermStat:
    """Requested statistics of one term. Unrequested attributes are None.

    Attributes:
        term: Term text
        frequency: Occurrences in the field
        offsets: (start, end) character offsets
        positions: Token positions
        document_frequency: Documents containing the term in the field
        ratio: frequency / document_frequency
    """

    term: str
    frequency: Optional[int] = None
    offsets: Optional[Tuple[Tuple[int, int], ...]] = None
    positions: Optional[Tuple[int, ...]] = None
    document_frequency: Optional[int] = None
    ratio: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Render with wire-compatible keys."""
        info: Dict[str, Any] = {}
        if self.frequency is not None:
            info["freq"] = self.frequency
        if self.offsets is not None:
            info["offsets"] = [{"start": s, "end": e} for s, e in self.offsets]
        if self.positions is not None:
            info["positions"] = list(self.positions)
        if self.document_frequency is not None:
            info["idf"] = self.document_frequency
        if self.ratio is not None:
            info["tf-idf"] = self.ratio
        return info


class TermStatisticsExtractor:
    """Extracts term statistics from one reader under fixed options."""

    def __init__(self, reader: IndexReader, options: TermVectorOptions):
        self.reader = reader
        self.options = options

    def iter_field(
        self,
        vector: FieldTermVector,
        lookup: Optional[TermLookupKey] = None,
    ) -> Generator[TermStat, None, None]:
        """Yield the statistics of each term of a field, in index order.

        Positions and offsets are only reported when the field recorded
        them at index time.

        Args:
            vector: The field's term vector
            lookup: Term dictionary key for the field; built from the
                vector's field when omitted
        """
        options = self.options
        if lookup is None and options.needs_document_frequency:
            lookup = TermLookupKey(vector.field)
        use_offsets = vector.store_offsets and options.include_offsets
        use_positions = vector.store_positions and options.include_positions

        for entry in vector:
            df = None
            if options.needs_document_frequency:
                df = lookup.document_frequency(self.reader, entry.term)
            yield TermStat(
                term=entry.term,
                frequency=entry.freq if options.include_frequency else None,
                offsets=entry.offsets if use_offsets else None,
                positions=entry.positions if use_positions else None,
                document_frequency=df if options.include_document_frequency else None,
                ratio=entry.freq / df if options.include_ratio else None,
            )

    def iter_document(
        self,
        doc_id: int,
    ) -> Generator[Tuple[str, Generator[TermStat, None, None]], None, None]:
        """Yield (field, term statistics) for each selected field of a document."""
        for vector in self.reader.term_vector(doc_id):
            if not self.options.accepts_field(vector.field):
                continue
            lookup = None
            if self.options.needs_document_frequency:
                lookup = TermLookupKey(vector.field)
            yield vector.field, self.iter_field(vector, lookup)

    def extract(self, doc_id: int) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Rendered statistics of a document: field -> term -> attributes."""
        fields: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for field_name, stats in self.iter_document(doc_id):
            fields[field_name] = {stat.term: stat.to_dict() for stat in stats}
        return fields


__all__ = [
    "MIN_DOCUMENT_FREQUENCY",
    "TermLookupKey",
    "TermStat",
    "TermStatisticsExtractor",
]
