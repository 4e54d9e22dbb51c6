"""TermVector Response Assembler - Ordered Term Vector Envelopes.

The envelope holds one entry per requested document, keyed ``doc-<id>``
in request order, followed by the name of the unique key field. Entries
from several shards may share a key, so the envelope is an ordered list
of pairs rather than a mapping.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from termvector_core.errors import MissingUniqueKeyError
from termvector_core.extractor import TermStatisticsExtractor
from termvector_core.options import TermVectorOptions
from termvector_core.reader import IndexReader

logger = logging.getLogger(__name__)

UNIQUE_KEY = "uniqueKey"
UNIQUE_KEY_FIELD_NAME = "uniqueKeyFieldName"
DOC_KEY_PREFIX = "doc-"


def doc_key(doc_id: int) -> str:
    return f"{DOC_KEY_PREFIX}{doc_id}"


class TermVectorEnvelope:
    """Ordered document entries plus the unique key field name.

    Entries are appended during a single pass and the envelope is closed
    by ``finish``; it cannot be modified afterwards.
    """

    def __init__(self):
        self._entries: List[Tuple[str, Dict[str, Any]]] = []
        self._unique_key_field_name: Optional[str] = None
        self._finished = False

    def add(self, key: str, entry: Dict[str, Any]) -> None:
        if self._finished:
            raise RuntimeError("Envelope is already finished")
        self._entries.append((key, entry))

    def finish(self, unique_key_field_name: Optional[str]) -> "TermVectorEnvelope":
        """Close the envelope, recording the unique key field name."""
        if self._finished:
            raise RuntimeError("Envelope is already finished")
        self._unique_key_field_name = unique_key_field_name
        self._finished = True
        return self

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def unique_key_field_name(self) -> Optional[str]:
        return self._unique_key_field_name

    @property
    def entries(self) -> Tuple[Tuple[str, Dict[str, Any]], ...]:
        return tuple(self._entries)

    def keys(self) -> List[str]:
        return [key for key, _ in self._entries]

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """First entry with the given key."""
        for entry_key, entry in self._entries:
            if entry_key == key:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        return iter(self._entries)

    def to_pairs(self) -> List[Tuple[str, Any]]:
        """Entries followed by the trailing unique key field name."""
        pairs: List[Tuple[str, Any]] = list(self._entries)
        if self._unique_key_field_name is not None:
            pairs.append((UNIQUE_KEY_FIELD_NAME, self._unique_key_field_name))
        return pairs

    def to_dict(self) -> Dict[str, Any]:
        """Mapping view. Later entries win when keys repeat."""
        return dict(self.to_pairs())

    def to_json(self) -> str:
        """Deterministic JSON object, repeated keys preserved in order."""
        members = [
            f"{json.dumps(key)}:{json.dumps(value, separators=(',', ':'))}"
            for key, value in self.to_pairs()
        ]
        return "{" + ",".join(members) + "}"

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[Any]]) -> "TermVectorEnvelope":
        """Rebuild a finished envelope from rendered pairs."""
        envelope = cls()
        unique_key_field_name = None
        for key, value in pairs:
            if key == UNIQUE_KEY_FIELD_NAME:
                unique_key_field_name = value
            else:
                envelope.add(key, value)
        return envelope.finish(unique_key_field_name)

    @classmethod
    def concat(
        cls,
        partials: Iterable["TermVectorEnvelope"],
        unique_key_field_name: Optional[str] = None,
    ) -> "TermVectorEnvelope":
        """Concatenate envelopes in order, without dedup or reordering.

        The unique key field name defaults to the first partial's.
        """
        merged = cls()
        for partial in partials:
            for key, entry in partial:
                merged.add(key, entry)
            if unique_key_field_name is None:
                unique_key_field_name = partial.unique_key_field_name
        return merged.finish(unique_key_field_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TermVectorEnvelope):
            return NotImplemented
        return self.to_pairs() == other.to_pairs()

    def __repr__(self) -> str:
        return f"TermVectorEnvelope(keys={self.keys()!r})"


class ResponseAssembler:
    """Runs the extractor over a sequence of documents."""

    def __init__(
        self,
        reader: IndexReader,
        options: TermVectorOptions,
        unique_key_field: str,
    ):
        """Initialize assembler.

        Args:
            reader: Acquired reader for the whole pass
            options: Resolved request options
            unique_key_field: Schema's unique key field name
        """
        self.reader = reader
        self.options = options
        self.unique_key_field = unique_key_field
        self._extractor = TermStatisticsExtractor(reader, options)

    def resolve_unique_key(self, doc_id: int) -> Any:
        """Load only the unique key field of a document.

        Raises:
            MissingUniqueKeyError: If the document has no unique key
        """
        stored = self.reader.stored_fields(doc_id, (self.unique_key_field,))
        value = stored.get(self.unique_key_field)
        if value is None:
            raise MissingUniqueKeyError(doc_id, self.unique_key_field)
        return value

    def build_entry(self, doc_id: int) -> Dict[str, Any]:
        """The document's entry, unique key first, then its fields."""
        entry: Dict[str, Any] = {UNIQUE_KEY: self.resolve_unique_key(doc_id)}
        entry.update(self._extractor.extract(doc_id))
        return entry

    def assemble(self, doc_ids: Iterable[int]) -> TermVectorEnvelope:
        """Build the envelope for the documents, in iteration order."""
        envelope = TermVectorEnvelope()
        count = 0
        for doc_id in doc_ids:
            envelope.add(doc_key(doc_id), self.build_entry(doc_id))
            count += 1
        logger.debug(f"Assembled term vectors for {count} documents")
        return envelope.finish(self.unique_key_field)


__all__ = [
    "UNIQUE_KEY",
    "UNIQUE_KEY_FIELD_NAME",
    "TermVectorEnvelope",
    "ResponseAssembler",
    "doc_key",
]
