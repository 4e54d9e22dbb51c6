"""TermVector Component - Term Vectors for Search Results.

Returns per-term statistics (frequency, positions, offsets, document
frequency and frequency / document frequency) for the documents of a
result list or for explicitly requested document ids.

Usage:
    component = TermVectorComponent(TermVectorConfig())
    component.attach(core)
    rb = ResponseBuilder(RequestParams({"tv": "true", "tv.tf": "true"}), results)
    component.process(rb)
    envelope = rb.response["termVectors"]

In a distributed request the component does no local work; at the
GET_FIELDS stage it registers one sub-request per shard and merges the
partial envelopes once the orchestrator hands the responses back.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from termvector_core.assembler import ResponseAssembler, TermVectorEnvelope
from termvector_core.config import TermVectorConfig
from termvector_core.core import IndexCore
from termvector_core.distributed import DistributedCoordinator, merge_shard_envelopes
from termvector_core.errors import ShardRequestError, TermVectorError
from termvector_core.options import TermVectorOptions
from termvector_core.request import (
    ResponseBuilder,
    ShardPurpose,
    ShardRequest,
    ShardResponse,
    Stage,
)

logger = logging.getLogger(__name__)


class TermVectorComponent:
    """Search component reporting term vectors of result documents."""

    name = "tv"
    description = "A component for working with term vectors"

    def __init__(self, config: Optional[TermVectorConfig] = None):
        """Initialize component.

        Args:
            config: Component configuration
        """
        self.config = config or TermVectorConfig()
        self._core: Optional[IndexCore] = None
        self._coordinator = DistributedCoordinator()

    def attach(self, core: IndexCore) -> None:
        """Bind the component to the index it reads from."""
        self._core = core
        logger.info(f"Term vector component attached to {core.name}")

    @property
    def core(self) -> IndexCore:
        if self._core is None:
            raise RuntimeError("Term vector component is not attached to a core")
        return self._core

    def prepare(self, rb: ResponseBuilder) -> None:
        pass

    def process(self, rb: ResponseBuilder) -> None:
        """Add the term vector envelope for the request to the response.

        Explicit ``tv.docIds`` take precedence over the result list.

        Raises:
            ClientInputError: On malformed options, before the index is touched
            IndexAccessError: If reading the index fails
        """
        if not TermVectorOptions.is_enabled(rb.params, self.config):
            return

        options = TermVectorOptions.from_params(rb.params, self.config)
        doc_ids: Sequence[int] = options.explicit_document_ids or ()
        if not doc_ids and rb.results is not None:
            doc_ids = rb.results.doc_ids

        core = self.core
        unique_key_field = core.schema.unique_key_field_name
        try:
            with core.searcher_manager.acquire() as reader:
                assembler = ResponseAssembler(reader, options, unique_key_field)
                envelope = assembler.assemble(doc_ids)
        except TermVectorError as e:
            logger.error(f"Term vector request failed on {core.name}: {e}")
            raise

        rb.response[self.config.response_key] = envelope

    def distributed_process(self, rb: ResponseBuilder) -> Stage:
        """Register per-shard sub-requests at the GET_FIELDS stage.

        Returns:
            Stage.DONE; the component needs no further stages
        """
        if rb.stage != Stage.GET_FIELDS:
            return Stage.DONE
        if not TermVectorOptions.is_enabled(rb.params, self.config):
            return Stage.DONE

        for sreq in self._coordinator.build_requests(rb):
            rb.add_request(self, sreq)
        rb.component_state[self.name] = []
        return Stage.DONE

    def handle_responses(self, rb: ResponseBuilder, sreq: ShardRequest) -> None:
        """Collect the shard responses of a term vector sub-request.

        Raises:
            ShardRequestError: If a shard failed
        """
        if sreq.purpose != ShardPurpose.GET_TERM_VECTORS:
            return
        for rsp in sreq.responses:
            if rsp.failed:
                logger.error(f"Shard {rsp.shard} failed term vector request: {rsp.exception}")
                raise ShardRequestError(rsp.shard, str(rsp.exception)) from rsp.exception
        collected: List[ShardResponse] = rb.component_state.setdefault(self.name, [])
        collected.extend(sreq.responses)

    def finish_stage(self, rb: ResponseBuilder) -> None:
        """Merge collected partial envelopes into the response."""
        if rb.stage != Stage.GET_FIELDS:
            return
        collected = rb.component_state.pop(self.name, None)
        if not collected:
            return

        rb.response[self.config.response_key] = self.merge_shard_responses(collected)
        logger.debug(f"Merged term vectors from {len(collected)} shard responses")

    def merge_shard_responses(self, responses: Sequence[ShardResponse]) -> TermVectorEnvelope:
        """Concatenate partial envelopes in response order.

        The unique key field name comes from the attached core when there
        is one, otherwise from the first partial.

        Raises:
            ShardRequestError: If any response failed
        """
        unique_key_field_name = None
        if self._core is not None:
            unique_key_field_name = self._core.schema.unique_key_field_name
        return merge_shard_envelopes(
            responses,
            self.config.response_key,
            unique_key_field_name,
        )


__all__ = ["TermVectorComponent"]
