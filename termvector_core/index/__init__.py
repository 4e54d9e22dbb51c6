"""TermVector Index Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from termvector_core.index.inverted import (
    InvertedIndex,
    Posting,
    PostingList,
    Term,
    TermDictionary,
)
from termvector_core.index.document import (
    DocumentStore,
    InMemoryDocumentStore,
    StoredDocument,
)
from termvector_core.index.termvector import (
    DocumentTermVector,
    FieldTermVector,
    TermVectorEntry,
)
from termvector_core.index.segment import (
    Segment,
    SegmentInfo,
    SegmentReader,
    SegmentState,
    SegmentWriter,
)

__all__ = [
    "InvertedIndex",
    "Posting",
    "PostingList",
    "Term",
    "TermDictionary",
    "DocumentStore",
    "InMemoryDocumentStore",
    "StoredDocument",
    "DocumentTermVector",
    "FieldTermVector",
    "TermVectorEntry",
    "Segment",
    "SegmentInfo",
    "SegmentReader",
    "SegmentState",
    "SegmentWriter",
]
