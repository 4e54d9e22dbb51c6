"""TermVector Standard Analyzers - Pre-configured Analyzers.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import re

from termvector_core.analyzers.base import (
    Analyzer,
    Token,
    TokenFilter,
    TokenStream,
    Tokenizer,
    register_analyzer,
)


class StandardTokenizer(Tokenizer):
    """Splits on anything that is not a word character.

    Contractions such as ``don't`` stay a single token.
    """

    WORD_PATTERN = re.compile(r"\w+(?:'\w+)?", re.UNICODE)

    def __init__(self, max_token_length: int = 255):
        self.max_token_length = max_token_length

    def tokenize(self, text: str) -> TokenStream:
        stream = TokenStream()
        position = 0
        for match in self.WORD_PATTERN.finditer(text):
            if len(match.group()) > self.max_token_length:
                continue
            stream.add(Token(match.group(), position, match.start(), match.end()))
            position += 1
        return stream


class WhitespaceTokenizer(Tokenizer):
    """Splits on whitespace only, preserving punctuation."""

    PATTERN = re.compile(r"\S+")

    def tokenize(self, text: str) -> TokenStream:
        return TokenStream([
            Token(m.group(), position, m.start(), m.end())
            for position, m in enumerate(self.PATTERN.finditer(text))
        ])


class KeywordTokenizer(Tokenizer):
    """Emits the entire input as one token."""

    def tokenize(self, text: str) -> TokenStream:
        if not text:
            return TokenStream()
        return TokenStream([Token(text, 0, 0, len(text))])


class LowercaseFilter(TokenFilter):
    """Converts tokens to lowercase."""

    def filter(self, stream: TokenStream) -> TokenStream:
        return TokenStream([t.with_text(t.text.lower()) for t in stream])


class StandardAnalyzer(Analyzer):
    """Standard tokenization with lowercasing."""

    def __init__(self, max_token_length: int = 255):
        super().__init__(
            tokenizer=StandardTokenizer(max_token_length=max_token_length),
            token_filters=[LowercaseFilter()],
        )


class WhitespaceAnalyzer(Analyzer):
    """Whitespace tokenization, case preserved."""

    def __init__(self):
        super().__init__(tokenizer=WhitespaceTokenizer())


class KeywordAnalyzer(Analyzer):
    """Whole value as a single token. Used for string and key fields."""

    def __init__(self):
        super().__init__(tokenizer=KeywordTokenizer())


register_analyzer("standard", StandardAnalyzer())
register_analyzer("whitespace", WhitespaceAnalyzer())
register_analyzer("keyword", KeywordAnalyzer())


__all__ = [
    "StandardTokenizer",
    "WhitespaceTokenizer",
    "KeywordTokenizer",
    "LowercaseFilter",
    "StandardAnalyzer",
    "WhitespaceAnalyzer",
    "KeywordAnalyzer",
]
