"""TermVector Distributed Support - Shard Fan-Out and Merge.

When the result documents of a request live on several shards, the
coordinator groups them by owning shard and prepares one sub-request per
shard carrying that shard's local document ids. Dispatch happens in the
orchestrator; the partial envelopes that come back are concatenated.

This module also holds an in-process orchestrator (ShardCluster) that
routes documents to local cores and executes sub-requests against them.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional, Tuple

from termvector_core.assembler import TermVectorEnvelope
from termvector_core.config import ShardConfig, TermVectorConfig
from termvector_core.core import IndexCore
from termvector_core.errors import ShardRequestError
from termvector_core.params import CommonParams, RequestParams, TermVectorParams
from termvector_core.request import (
    ResponseBuilder,
    ShardDoc,
    ShardPurpose,
    ShardRequest,
    ShardResponse,
    Stage,
)

logger = logging.getLogger(__name__)


def group_by_shard(docs: Iterable[ShardDoc]) -> Dict[str, List[ShardDoc]]:
    """Group result documents by owning shard, in first-seen order."""
    groups: Dict[str, List[ShardDoc]] = {}
    for sdoc in docs:
        groups.setdefault(sdoc.shard, []).append(sdoc)
    return groups


class DistributedCoordinator:
    """Builds per-shard term vector sub-requests."""

    def __init__(self, purpose: ShardPurpose = ShardPurpose.GET_TERM_VECTORS):
        self.purpose = purpose

    def build_shard_request(
        self,
        params: RequestParams,
        shard: str,
        docs: List[ShardDoc],
    ) -> ShardRequest:
        """One sub-request for one shard's documents.

        The query is removed: the shard already knows the documents.
        """
        sub_params = params.copy()
        sub_params.remove(CommonParams.Q)
        sub_params.set(TermVectorParams.DOC_IDS, ",".join(str(d.doc_id) for d in docs))
        return ShardRequest(purpose=self.purpose, shards=[shard], params=sub_params)

    def build_requests(self, rb: ResponseBuilder) -> List[ShardRequest]:
        """Sub-requests for every shard owning at least one result."""
        requests = []
        for shard, docs in group_by_shard(rb.result_ids.values()).items():
            if not docs:
                continue
            requests.append(self.build_shard_request(rb.params, shard, docs))
        logger.debug(f"Prepared {len(requests)} shard requests for "
                     f"{len(rb.result_ids)} documents")
        return requests


def merge_shard_envelopes(
    responses: Iterable[ShardResponse],
    response_key: str,
    unique_key_field_name: Optional[str] = None,
) -> TermVectorEnvelope:
    """Concatenate the partial envelopes of shard responses, in order.

    Raises:
        ShardRequestError: If any shard response failed
    """
    partials = []
    for rsp in responses:
        if rsp.failed:
            raise ShardRequestError(rsp.shard, str(rsp.exception)) from rsp.exception
        pairs = rsp.response.get(response_key)
        if pairs is not None:
            partials.append(TermVectorEnvelope.from_pairs(pairs))
    return TermVectorEnvelope.concat(partials, unique_key_field_name)


class ShardRouter:
    """Assigns unique keys to shards by hash."""

    def __init__(self, shard_names: List[str]):
        if not shard_names:
            raise ValueError("At least one shard is required")
        self.shard_names = list(shard_names)

    def route(self, key: Any) -> str:
        hash_val = int(hashlib.md5(str(key).encode()).hexdigest(), 16)
        return self.shard_names[hash_val % len(self.shard_names)]


class ShardCluster:
    """In-process orchestrator over a set of local cores.

    Each shard is an IndexCore with its own term vector component. The
    cluster plays the coordinating node: it routes documents, resolves
    result keys into shard documents, dispatches sub-requests and feeds
    the responses back to the requesting component.
    """

    def __init__(
        self,
        cores: List[IndexCore],
        component_config: Optional[TermVectorConfig] = None,
        config: Optional[ShardConfig] = None,
    ):
        """Initialize cluster.

        Args:
            cores: Shard cores; each core's name is its shard label
            component_config: Configuration for the shard components
            config: Dispatch configuration
        """
        from termvector_core.component import TermVectorComponent

        self.config = config or ShardConfig()
        self.cores: Dict[str, IndexCore] = {}
        self.components: Dict[str, TermVectorComponent] = {}
        for core in cores:
            if core.name in self.cores:
                raise ValueError(f"Duplicate shard name: {core.name}")
            self.cores[core.name] = core
            component = TermVectorComponent(component_config)
            component.attach(core)
            self.components[core.name] = component
        self.router = ShardRouter(list(self.cores))

    def add_document(self, fields: Dict[str, Any]) -> str:
        """Route a document to its shard. Returns the shard label."""
        first_core = next(iter(self.cores.values()))
        key = fields.get(first_core.schema.unique_key_field_name)
        shard = self.router.route(key)
        self.cores[shard].add_document(fields)
        return shard

    def commit(self) -> None:
        for core in self.cores.values():
            core.commit()

    def resolve_results(self, keys: List[Any]) -> Dict[str, ShardDoc]:
        """Shard documents for a ranked list of unique keys.

        Raises:
            KeyError: If a key is not found on its shard
        """
        result_ids: Dict[str, ShardDoc] = {}
        for position, key in enumerate(keys):
            shard = self.router.route(key)
            doc_id = self.cores[shard].lookup_doc_id(key)
            if doc_id is None:
                raise KeyError(f"Unknown document key: {key}")
            result_ids[str(key)] = ShardDoc(
                id=str(key),
                shard=shard,
                doc_id=doc_id,
                position_in_response=position,
            )
        return result_ids

    def execute(self, sreq: ShardRequest) -> List[ShardResponse]:
        """Run a sub-request on each of its target shards."""
        return [self._execute_on(shard, sreq.params) for shard in sreq.shards]

    def _execute_on(self, shard: str, params: RequestParams) -> ShardResponse:
        component = self.components.get(shard)
        if component is None:
            return ShardResponse(shard, exception=ShardRequestError(shard, "unknown shard"))
        rb = ResponseBuilder(params.copy())
        try:
            component.process(rb)
        except Exception as e:
            logger.error(f"Shard {shard} request failed: {e}")
            return ShardResponse(shard, exception=e)
        return ShardResponse(shard, response=_render(rb.response))

    def _dispatch(
        self,
        rb: ResponseBuilder,
        outgoing: List[Tuple[Any, ShardRequest]],
    ) -> None:
        if self.config.parallel and len(outgoing) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                futures = [pool.submit(self.execute, sreq) for _, sreq in outgoing]
                results = [f.result() for f in futures]
        else:
            results = [self.execute(sreq) for _, sreq in outgoing]

        for (component, sreq), responses in zip(outgoing, results):
            sreq.responses.extend(responses)
            component.handle_responses(rb, sreq)

    def run(self, component: Any, rb: ResponseBuilder) -> ResponseBuilder:
        """Drive a distributed request through its stages.

        Args:
            component: Coordinating component
            rb: Request state with ``result_ids`` filled by the query stage

        Returns:
            The same builder, with the merged response
        """
        rb.is_distributed = True
        for stage in (Stage.PARSE_QUERY, Stage.EXECUTE_QUERY, Stage.GET_FIELDS):
            rb.stage = stage
            component.distributed_process(rb)
            self._dispatch(rb, rb.take_outgoing())
            component.finish_stage(rb)
        rb.stage = Stage.DONE
        return rb

    def close(self) -> None:
        for core in self.cores.values():
            core.close()


def _render(response: Dict[str, Any]) -> Dict[str, Any]:
    """Wire form of a shard response: envelopes become pair lists."""
    return {
        key: value.to_pairs() if isinstance(value, TermVectorEnvelope) else value
        for key, value in response.items()
    }


__all__ = [
    "DistributedCoordinator",
    "ShardCluster",
    "ShardRouter",
    "group_by_shard",
    "merge_shard_envelopes",
]
