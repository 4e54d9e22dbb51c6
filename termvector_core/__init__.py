"""TermVector - Term Vector Statistics for Search Results.

Reports per-document, per-field, per-term statistics for the documents of
a search result: term frequency, positions, character offsets, document
frequency and frequency / document frequency. Works on a single index or
across shards by fanning out one sub-request per shard and concatenating
the partial results.

Architecture:
┌─────────────────────────────────────────────────────────────────────────────┐
│                         TermVector Component                                │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                        Request Pipeline                             │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │  Options   │→ │  Acquire   │→ │  Assemble  │→ │  Release   │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                        Distributed Stage                            │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │  Group by  │→ │ Sub-request│→ │  Dispatch  │→ │   Merge    │    │   │
│   │  │   Shard    │  │  per Shard │  │            │  │  Partials  │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                          Index Layer                                │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │  Inverted  │  │    Term    │  │  Document  │  │  Segment   │    │   │
│   │  │   Index    │  │  Vectors   │  │   Store    │  │   Reader   │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

__version__ = "1.0.0"
__author__ = "BlackRoad OS"
__license__ = "Proprietary"

# Component
from termvector_core.component import TermVectorComponent
from termvector_core.config import IndexConfig, ShardConfig, TermVectorConfig
from termvector_core.errors import (
    ClientInputError,
    ErrorCode,
    IndexAccessError,
    MissingUniqueKeyError,
    ShardRequestError,
    TermVectorError,
)
from termvector_core.options import TermVectorOptions
from termvector_core.params import CommonParams, RequestParams, TermVectorParams

# Extraction
from termvector_core.extractor import TermStat, TermStatisticsExtractor
from termvector_core.assembler import ResponseAssembler, TermVectorEnvelope

# Request state
from termvector_core.request import (
    DocList,
    ResponseBuilder,
    ShardDoc,
    ShardPurpose,
    ShardRequest,
    ShardResponse,
    Stage,
)

# Distributed
from termvector_core.distributed import (
    DistributedCoordinator,
    ShardCluster,
    ShardRouter,
)

# Index
from termvector_core.core import IndexCore
from termvector_core.reader import IndexReader, RefCounted, SearcherManager
from termvector_core.schema import FieldMapping, IndexSchema

__all__ = [
    # Version
    "__version__",
    "__author__",
    "__license__",
    # Component
    "TermVectorComponent",
    "TermVectorConfig",
    "IndexConfig",
    "ShardConfig",
    "TermVectorOptions",
    "CommonParams",
    "RequestParams",
    "TermVectorParams",
    # Errors
    "ErrorCode",
    "TermVectorError",
    "ClientInputError",
    "IndexAccessError",
    "MissingUniqueKeyError",
    "ShardRequestError",
    # Extraction
    "TermStat",
    "TermStatisticsExtractor",
    "ResponseAssembler",
    "TermVectorEnvelope",
    # Request state
    "DocList",
    "ResponseBuilder",
    "ShardDoc",
    "ShardPurpose",
    "ShardRequest",
    "ShardResponse",
    "Stage",
    # Distributed
    "DistributedCoordinator",
    "ShardCluster",
    "ShardRouter",
    # Index
    "IndexCore",
    "IndexReader",
    "RefCounted",
    "SearcherManager",
    "FieldMapping",
    "IndexSchema",
]
