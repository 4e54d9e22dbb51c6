"""TermVector Schema - Field Mappings and Unique Key.

The schema decides, per field, what is captured at index time: whether
the value is stored, whether it is indexed, and whether a term vector
with positions and offsets is recorded for each document.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from termvector_core.analyzers import Analyzer, get_analyzer

logger = logging.getLogger(__name__)


@dataclass
class FieldMapping:
    """Field mapping definition.

    Attributes:
        name: Field name
        type: Field type (text or string)
        analyzer: Analyzer name for text fields
        indexed: Whether terms are added to the inverted index
        stored: Whether the original value is kept
        term_vectors: Whether a per-document term vector is recorded
        term_positions: Record positions in the term vector
        term_offsets: Record character offsets in the term vector
        multi_valued: Whether the field accepts a list of values
    """

    name: str
    type: str = "text"
    analyzer: Optional[str] = None
    indexed: bool = True
    stored: bool = False
    term_vectors: bool = False
    term_positions: bool = False
    term_offsets: bool = False
    multi_valued: bool = False

    def __post_init__(self):
        if self.type not in ("text", "string"):
            raise ValueError(f"Unsupported field type: {self.type}")
        if (self.term_positions or self.term_offsets) and not self.term_vectors:
            raise ValueError(
                f"Field '{self.name}' stores term positions or offsets "
                f"without term vectors"
            )

    def get_analyzer(self, default: str = "standard") -> Analyzer:
        """Resolve the analyzer for this field.

        String fields always index their whole value as one term.
        """
        if self.type == "string":
            return get_analyzer("keyword")
        return get_analyzer(self.analyzer or default)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "type": self.type,
            "analyzer": self.analyzer,
            "indexed": self.indexed,
            "stored": self.stored,
            "term_vectors": self.term_vectors,
            "term_positions": self.term_positions,
            "term_offsets": self.term_offsets,
            "multi_valued": self.multi_valued,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldMapping":
        """Create from dictionary."""
        return cls(**data)


class IndexSchema:
    """Ordered set of field mappings plus the declared unique key."""

    def __init__(self, fields: List[FieldMapping], unique_key: str):
        """Initialize schema.

        Args:
            fields: Field mappings
            unique_key: Name of the unique key field

        Raises:
            ValueError: If the unique key field is missing or not stored
        """
        self._fields: Dict[str, FieldMapping] = {}
        for mapping in fields:
            if mapping.name in self._fields:
                raise ValueError(f"Duplicate field: {mapping.name}")
            self._fields[mapping.name] = mapping

        key_field = self._fields.get(unique_key)
        if key_field is None:
            raise ValueError(f"Unique key field '{unique_key}' is not defined")
        if not key_field.stored:
            raise ValueError(f"Unique key field '{unique_key}' must be stored")
        self._unique_key = unique_key

    @property
    def unique_key_field_name(self) -> str:
        """Name of the declared unique key field."""
        return self._unique_key

    def get_field(self, name: str) -> Optional[FieldMapping]:
        return self._fields.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldMapping]:
        return iter(self._fields.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unique_key": self._unique_key,
            "fields": [f.to_dict() for f in self._fields.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexSchema":
        return cls(
            fields=[FieldMapping.from_dict(f) for f in data["fields"]],
            unique_key=data["unique_key"],
        )


__all__ = ["FieldMapping", "IndexSchema"]
