"""TermVector Index Structures - Per-Document Term Vectors.

A term vector is the per-document, per-field record of which terms occur,
how often, and optionally where. It is captured at index time for fields
whose mapping enables it and is read back verbatim at query time.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from termvector_core.analyzers import TokenStream


@dataclass(frozen=True)
class TermVectorEntry:
    """One term of a field's term vector.

    Attributes:
        term: Term text
        freq: Occurrences of the term in the field
        positions: Token positions, empty if not stored
        offsets: (start, end) character offsets, empty if not stored
    """

    term: str
    freq: int
    positions: Tuple[int, ...] = ()
    offsets: Tuple[Tuple[int, int], ...] = ()


@dataclass(frozen=True)
class FieldTermVector:
    """Term vector of one field of one document.

    Attributes:
        field: Field name
        store_positions: Whether positions were captured at index time
        store_offsets: Whether offsets were captured at index time
        entries: Term entries in enumeration order
    """

    field: str
    store_positions: bool
    store_offsets: bool
    entries: Tuple[TermVectorEntry, ...] = ()

    def __iter__(self) -> Iterator[TermVectorEntry]:
        return iter(self.entries)

    @classmethod
    def from_tokens(
        cls,
        field_name: str,
        stream: TokenStream,
        store_positions: bool,
        store_offsets: bool,
    ) -> "FieldTermVector":
        """Build a field term vector from analyzed tokens.

        Terms are enumerated in order of first occurrence.

        Args:
            field_name: Field name
            stream: Tokens of every value of the field
            store_positions: Capture positions
            store_offsets: Capture offsets

        Returns:
            The field's term vector
        """
        positions: Dict[str, List[int]] = {}
        offsets: Dict[str, List[Tuple[int, int]]] = {}
        for token in stream:
            positions.setdefault(token.text, []).append(token.position)
            offsets.setdefault(token.text, []).append(
                (token.start_offset, token.end_offset)
            )

        entries = tuple(
            TermVectorEntry(
                term=term,
                freq=len(term_positions),
                positions=tuple(term_positions) if store_positions else (),
                offsets=tuple(offsets[term]) if store_offsets else (),
            )
            for term, term_positions in positions.items()
        )
        return cls(field_name, store_positions, store_offsets, entries)


@dataclass(frozen=True)
class DocumentTermVector:
    """All recorded field term vectors of one document, in field order."""

    doc_id: int
    fields: Tuple[FieldTermVector, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[FieldTermVector]:
        return iter(self.fields)

    def get(self, field_name: str) -> Optional[FieldTermVector]:
        for vector in self.fields:
            if vector.field == field_name:
                return vector
        return None


__all__ = ["TermVectorEntry", "FieldTermVector", "DocumentTermVector"]
