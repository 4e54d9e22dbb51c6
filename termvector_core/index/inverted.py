"""TermVector Inverted Index - Per-Field Term Dictionary and Postings.

The inverted index maps each term of a field to the documents containing
it. Term vectors answer "which terms are in this document"; the inverted
index answers "how many documents contain this term", which is the
document frequency reported alongside each term.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from termvector_core.analyzers import TokenStream

logger = logging.getLogger(__name__)


@dataclass
class Term:
    """A term in the index.

    Attributes:
        text: Term text
        field: Field name
        doc_freq: Number of documents containing the term
        total_freq: Total occurrences across all documents
    """

    text: str
    field: str = ""
    doc_freq: int = 0
    total_freq: int = 0


@dataclass
class Posting:
    """Occurrences of a term in one document.

    Attributes:
        doc_id: Segment-local document number
        term_freq: Term frequency in the document
    """

    doc_id: int
    term_freq: int = 1


class PostingList:
    """Postings of one term, in document order."""

    def __init__(self, term: Term):
        self.term = term
        self._postings: List[Posting] = []

    def add(self, posting: Posting) -> None:
        """Append the posting of a newly indexed document.

        Raises:
            ValueError: If the document is not after the last one
        """
        if self._postings and posting.doc_id <= self._postings[-1].doc_id:
            raise ValueError(
                f"Posting for document {posting.doc_id} is out of order "
                f"for term '{self.term.text}'"
            )
        self._postings.append(posting)
        self.term.doc_freq = len(self._postings)
        self.term.total_freq += posting.term_freq

    def __len__(self) -> int:
        return len(self._postings)


class TermDictionary:
    """Field -> term -> Term lookup table."""

    def __init__(self):
        self._terms: Dict[str, Dict[str, Term]] = {}
        self._lock = threading.RLock()

    def add(self, term: Term) -> None:
        with self._lock:
            self._terms.setdefault(term.field, {})[term.text] = term

    def term_count(self, field: Optional[str] = None) -> int:
        with self._lock:
            if field is not None:
                return len(self._terms.get(field, {}))
            return sum(len(terms) for terms in self._terms.values())


class InvertedIndex:
    """Inverted index for a single field."""

    def __init__(
        self,
        field_name: str,
        term_dictionary: Optional[TermDictionary] = None,
    ):
        """Initialize inverted index.

        Args:
            field_name: Field name for this index
            term_dictionary: Shared dictionary to register new terms in
        """
        self.field_name = field_name

        self._posting_lists: Dict[str, PostingList] = {}
        self._term_dictionary = term_dictionary or TermDictionary()
        self._doc_ids: Set[int] = set()
        self._total_terms = 0
        self._lock = threading.RLock()

    def index_document(self, doc_id: int, stream: TokenStream) -> None:
        """Index the tokens of one field of a document.

        Args:
            doc_id: Segment-local document number
            stream: Analyzed tokens of every value of the field
        """
        with self._lock:
            frequencies: Dict[str, int] = {}
            for token in stream:
                frequencies[token.text] = frequencies.get(token.text, 0) + 1
            if not frequencies:
                return

            for text, term_freq in frequencies.items():
                posting_list = self._posting_lists.get(text)
                if posting_list is None:
                    term = Term(text=text, field=self.field_name)
                    posting_list = PostingList(term)
                    self._posting_lists[text] = posting_list
                    self._term_dictionary.add(term)
                posting_list.add(Posting(doc_id=doc_id, term_freq=term_freq))

            self._doc_ids.add(doc_id)
            self._total_terms += len(stream)

    def get_document_frequency(self, term: str) -> int:
        """Number of documents containing the term, 0 if absent."""
        posting_list = self._posting_lists.get(term)
        return len(posting_list) if posting_list else 0

    @property
    def document_count(self) -> int:
        return len(self._doc_ids)

    @property
    def term_count(self) -> int:
        return len(self._posting_lists)

    def get_stats(self) -> Dict[str, Any]:
        """Get index statistics."""
        return {
            "field_name": self.field_name,
            "document_count": self.document_count,
            "term_count": self.term_count,
            "total_terms": self._total_terms,
        }


__all__ = [
    "Term",
    "Posting",
    "PostingList",
    "TermDictionary",
    "InvertedIndex",
]
