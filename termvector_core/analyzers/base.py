"""TermVector Analyzer Base - Text Analysis Pipeline.

Analysis turns field text into tokens carrying the position and
character offsets that term vectors record.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Token:
    """A token in the analysis stream.

    Attributes:
        text: Token text
        position: Token position within the field
        start_offset: Start character offset
        end_offset: End character offset (exclusive)
    """

    text: str
    position: int = 0
    start_offset: int = 0
    end_offset: int = 0

    def with_text(self, text: str) -> "Token":
        """Copy of this token with different text."""
        return Token(text, self.position, self.start_offset, self.end_offset)


class TokenStream:
    """An ordered stream of tokens."""

    def __init__(self, tokens: Optional[List[Token]] = None):
        self._tokens: List[Token] = tokens or []

    def add(self, token: Token) -> None:
        self._tokens.append(token)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def get_texts(self) -> List[str]:
        """Get list of token texts."""
        return [t.text for t in self._tokens]


class Tokenizer(ABC):
    """Breaks text into tokens."""

    @abstractmethod
    def tokenize(self, text: str) -> TokenStream:
        pass


class TokenFilter(ABC):
    """Transforms or removes tokens in a stream."""

    @abstractmethod
    def filter(self, stream: TokenStream) -> TokenStream:
        pass


class Analyzer:
    """Tokenizer followed by a chain of token filters."""

    def __init__(
        self,
        tokenizer: Tokenizer,
        token_filters: Optional[List[TokenFilter]] = None,
    ):
        """Initialize analyzer.

        Args:
            tokenizer: Tokenizer to use
            token_filters: Token filters to apply in order
        """
        self._tokenizer = tokenizer
        self._token_filters = token_filters or []

    def analyze(self, text: str) -> TokenStream:
        """Analyze text into tokens.

        Args:
            text: Input text

        Returns:
            Token stream
        """
        stream = self._tokenizer.tokenize(text)
        for token_filter in self._token_filters:
            stream = token_filter.filter(stream)
        return stream


_analyzers: Dict[str, Analyzer] = {}


def register_analyzer(name: str, analyzer: Analyzer) -> None:
    """Register an analyzer under a name."""
    _analyzers[name] = analyzer


def get_analyzer(name: str) -> Analyzer:
    """Get analyzer by name.

    Raises:
        KeyError: If no analyzer is registered under the name
    """
    try:
        return _analyzers[name]
    except KeyError:
        raise KeyError(f"Unknown analyzer: {name}") from None


__all__ = [
    "Token",
    "TokenStream",
    "Tokenizer",
    "TokenFilter",
    "Analyzer",
    "register_analyzer",
    "get_analyzer",
]
