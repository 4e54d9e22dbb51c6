"""TermVector Request State - Response Builder and Protocol Stages.

A ResponseBuilder carries one request through the search pipeline: its
parameters, the result list produced by the query stage, the response
being built, and, in distributed mode, the current stage and the shard
sub-requests registered for dispatch.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from termvector_core.params import RequestParams

logger = logging.getLogger(__name__)


class Stage(IntEnum):
    """Distributed request stages, in execution order."""

    START = 0
    PARSE_QUERY = 1000
    EXECUTE_QUERY = 2000
    GET_FIELDS = 3000
    DONE = 2 ** 31 - 1


class ShardPurpose(Enum):
    """Why a shard sub-request was sent."""

    GET_TERM_VECTORS = auto()


class DocList:
    """Ordered document ids of a result list."""

    def __init__(self, doc_ids: Sequence[int]):
        self._doc_ids: Tuple[int, ...] = tuple(doc_ids)

    @property
    def doc_ids(self) -> Tuple[int, ...]:
        return self._doc_ids

    def __iter__(self) -> Iterator[int]:
        return iter(self._doc_ids)

    def __len__(self) -> int:
        return len(self._doc_ids)


@dataclass
class ShardDoc:
    """A result document as seen by the coordinating node.

    Attributes:
        id: Unique key value
        shard: Label of the owning shard
        doc_id: Document id local to the shard's reader
        position_in_response: Rank in the merged result list
    """

    id: str
    shard: str
    doc_id: int
    position_in_response: int = 0


@dataclass
class ShardResponse:
    """Response of one shard to a sub-request.

    Attributes:
        shard: Shard label
        response: Rendered response body
        exception: Failure raised while serving the sub-request
    """

    shard: str
    response: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.exception is not None


@dataclass
class ShardRequest:
    """A sub-request to one or more shards.

    Attributes:
        purpose: Why the request is sent
        shards: Target shard labels
        params: Request parameters
        responses: Collected shard responses
    """

    purpose: ShardPurpose
    shards: List[str]
    params: RequestParams
    responses: List[ShardResponse] = field(default_factory=list)


class ResponseBuilder:
    """Per-request state shared by the pipeline components."""

    def __init__(
        self,
        params: RequestParams,
        results: Optional[DocList] = None,
        distributed: bool = False,
    ):
        """Initialize builder.

        Args:
            params: Request parameters
            results: Result list of the query stage (single shard)
            distributed: Whether the request spans shards
        """
        self.params = params
        self.results = results
        self.is_distributed = distributed
        self.stage = Stage.START
        self.result_ids: Dict[str, ShardDoc] = {}
        self.response: Dict[str, Any] = {}
        self.outgoing: List[Tuple[Any, ShardRequest]] = []
        self.component_state: Dict[str, Any] = {}

    def add_request(self, component: Any, sreq: ShardRequest) -> None:
        """Register a shard sub-request for dispatch."""
        self.outgoing.append((component, sreq))
        logger.debug(f"Queued {sreq.purpose.name} request for shards {sreq.shards}")

    def take_outgoing(self) -> List[Tuple[Any, ShardRequest]]:
        """Remove and return the registered sub-requests."""
        outgoing, self.outgoing = self.outgoing, []
        return outgoing


__all__ = [
    "Stage",
    "ShardPurpose",
    "DocList",
    "ShardDoc",
    "ShardRequest",
    "ShardResponse",
    "ResponseBuilder",
]
