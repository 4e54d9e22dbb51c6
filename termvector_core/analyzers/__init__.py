"""TermVector Analyzers.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from termvector_core.analyzers.base import (
    Analyzer,
    Token,
    TokenStream,
    Tokenizer,
    TokenFilter,
    get_analyzer,
    register_analyzer,
)
from termvector_core.analyzers.standard import (
    StandardAnalyzer,
    WhitespaceAnalyzer,
    KeywordAnalyzer,
    LowercaseFilter,
    StandardTokenizer,
    WhitespaceTokenizer,
    KeywordTokenizer,
)

__all__ = [
    "Analyzer",
    "Token",
    "TokenStream",
    "Tokenizer",
    "TokenFilter",
    "get_analyzer",
    "register_analyzer",
    "StandardAnalyzer",
    "WhitespaceAnalyzer",
    "KeywordAnalyzer",
    "LowercaseFilter",
    "StandardTokenizer",
    "WhitespaceTokenizer",
    "KeywordTokenizer",
]
