"""TermVector Configuration - Component and Index Settings.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class TermVectorConfig:
    """Term vector component configuration.

    Attributes:
        enabled_by_default: Run the component when the request omits ``tv``
        default_fields: Fields to report when the request names none
        response_key: Top-level response key for the term vector block
        max_doc_ids: Maximum number of explicit document ids per request
    """

    enabled_by_default: bool = False
    default_fields: List[str] = field(default_factory=list)
    response_key: str = "termVectors"
    max_doc_ids: int = 10000

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "enabled_by_default": self.enabled_by_default,
            "default_fields": list(self.default_fields),
            "response_key": self.response_key,
            "max_doc_ids": self.max_doc_ids,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TermVectorConfig":
        """Create from dictionary."""
        return cls(
            enabled_by_default=data.get("enabled_by_default", False),
            default_fields=list(data.get("default_fields", [])),
            response_key=data.get("response_key", "termVectors"),
            max_doc_ids=data.get("max_doc_ids", 10000),
        )


@dataclass
class IndexConfig:
    """Index core configuration.

    Attributes:
        name: Core name, used as the shard label
        max_docs_per_segment: Documents per segment before rolling
        default_analyzer: Analyzer for text fields without one
    """

    name: str = "default"
    max_docs_per_segment: int = 100000
    default_analyzer: str = "standard"


@dataclass
class ShardConfig:
    """In-process shard dispatcher configuration.

    Attributes:
        parallel: Dispatch sub-requests on a thread pool
        max_workers: Thread pool size
    """

    parallel: bool = False
    max_workers: int = 4


__all__ = ["TermVectorConfig", "IndexConfig", "ShardConfig"]
