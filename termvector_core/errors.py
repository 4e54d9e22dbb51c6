"""TermVector Errors - Request Failure Taxonomy.

Every failure raised by the term vector component carries an error code
so the enclosing request pipeline can choose the wire-level status.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Error classification for request failures."""

    BAD_REQUEST = 400
    SERVER_ERROR = 500


class TermVectorError(Exception):
    """Base class for term vector failures.

    Attributes:
        code: Error classification
    """

    code: ErrorCode = ErrorCode.SERVER_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        if code is not None:
            self.code = code

    @property
    def status(self) -> int:
        """Numeric status for the error code."""
        return self.code.value


class ClientInputError(TermVectorError):
    """The caller sent a malformed request parameter."""

    code = ErrorCode.BAD_REQUEST


class IndexAccessError(TermVectorError):
    """Reading term vectors, stored fields or the term dictionary failed."""


class MissingUniqueKeyError(IndexAccessError):
    """A document has no value for the schema's unique key field."""

    def __init__(self, doc_id: int, field_name: str):
        super().__init__(
            f"Document {doc_id} has no value for unique key field '{field_name}'"
        )
        self.doc_id = doc_id
        self.field_name = field_name


class ShardRequestError(TermVectorError):
    """A shard sub-request failed."""

    def __init__(self, shard: str, message: str):
        super().__init__(f"Shard '{shard}' failed: {message}")
        self.shard = shard


__all__ = [
    "ErrorCode",
    "TermVectorError",
    "ClientInputError",
    "IndexAccessError",
    "MissingUniqueKeyError",
    "ShardRequestError",
]
