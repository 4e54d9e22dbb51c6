"""TermVector Options - Per-Request Feature Flags.

Options are resolved once from the request parameters and never change
for the rest of the request.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from termvector_core.config import TermVectorConfig
from termvector_core.errors import ClientInputError
from termvector_core.params import (
    CommonParams,
    RequestParams,
    TermVectorParams,
    split_list,
)

logger = logging.getLogger(__name__)


def parse_doc_ids(
    values: Optional[List[str]],
    max_doc_ids: Optional[int] = None,
) -> Optional[Tuple[int, ...]]:
    """Parse explicit document ids.

    Each value may hold several ids separated by commas or whitespace.

    Args:
        values: Raw parameter values
        max_doc_ids: Maximum number of ids accepted

    Returns:
        Ids in request order, or None if no values were given

    Raises:
        ClientInputError: If a token is not an integer or there are too many
    """
    if not values:
        return None

    doc_ids: List[int] = []
    for value in values:
        for token in split_list(value):
            try:
                doc_ids.append(int(token))
            except ValueError as e:
                logger.warning(f"Rejected document id token {token!r}")
                raise ClientInputError(f"Invalid document id: {token!r}") from e

    if max_doc_ids is not None and len(doc_ids) > max_doc_ids:
        raise ClientInputError(
            f"Too many document ids: {len(doc_ids)} (max {max_doc_ids})"
        )
    return tuple(doc_ids)


def _parse_fields(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    return [name for value in values for name in split_list(value)]


@dataclass(frozen=True)
class TermVectorOptions:
    """Resolved term vector options.

    Attributes:
        include_frequency: Report term frequency
        include_positions: Report positions (if stored)
        include_offsets: Report offsets (if stored)
        include_document_frequency: Report the raw document frequency
        include_ratio: Report frequency / document frequency
        field_filter: Fields to report; empty means every field
        explicit_document_ids: Ids to report instead of the result list
    """

    include_frequency: bool = False
    include_positions: bool = False
    include_offsets: bool = False
    include_document_frequency: bool = False
    include_ratio: bool = False
    field_filter: FrozenSet[str] = frozenset()
    explicit_document_ids: Optional[Tuple[int, ...]] = None

    @property
    def needs_document_frequency(self) -> bool:
        return self.include_document_frequency or self.include_ratio

    def accepts_field(self, field: str) -> bool:
        return not self.field_filter or field in self.field_filter

    @staticmethod
    def is_enabled(params: RequestParams, config: Optional[TermVectorConfig] = None) -> bool:
        """Whether the request turns the component on."""
        default = config.enabled_by_default if config else False
        return params.get_bool(TermVectorParams.TV, default)

    @classmethod
    def from_params(
        cls,
        params: RequestParams,
        config: Optional[TermVectorConfig] = None,
    ) -> "TermVectorOptions":
        """Resolve options from request parameters.

        ``tv.all`` turns on every per-term attribute. ``tv.fl`` falls back
        to ``fl``, then to the configured default fields. A ``*`` field
        means every field.

        Raises:
            ClientInputError: On a malformed boolean or document id
        """
        config = config or TermVectorConfig()

        include_all = params.get_bool(TermVectorParams.ALL, False)
        fields = _parse_fields(params.get_params(TermVectorParams.FIELDS))
        if fields is None:
            fields = _parse_fields(params.get_params(CommonParams.FL))
        if fields is None:
            fields = list(config.default_fields)
        if "*" in fields:
            fields = []

        return cls(
            include_frequency=include_all or params.get_bool(TermVectorParams.TF),
            include_positions=include_all or params.get_bool(TermVectorParams.POSITIONS),
            include_offsets=include_all or params.get_bool(TermVectorParams.OFFSETS),
            include_document_frequency=include_all or params.get_bool(TermVectorParams.IDF),
            include_ratio=include_all or params.get_bool(TermVectorParams.TF_IDF),
            field_filter=frozenset(fields),
            explicit_document_ids=parse_doc_ids(
                params.get_params(TermVectorParams.DOC_IDS),
                config.max_doc_ids,
            ),
        )


__all__ = ["TermVectorOptions", "parse_doc_ids"]
