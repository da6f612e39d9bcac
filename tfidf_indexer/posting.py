"""
Value types stored in the index.

A posting records a term's occurrence in a document (inverted index) or a
document's use of a term (direct index). All types are immutable; the index
replaces entries by position instead of mutating them in place.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Posting:
    """
    Entry of a term's inverted list.
    - doc_id: sequential document id
    - weight: raw term frequency after the first pass, tf-idf weight after the second
    """

    doc_id: int
    weight: float

    def __repr__(self) -> str:
        return f"Posting(doc_id={self.doc_id}, weight={self.weight!r})"


@dataclass(frozen=True)
class DirectPosting:
    """Entry of a document's direct list: (term_id, weight)."""

    term_id: int
    weight: float


@dataclass(frozen=True)
class Term:
    term_id: int
    idf: float


@dataclass(frozen=True)
class DocumentEntry:
    """Document name (file name without extension) and vector norm."""

    name: str
    norm: float = 0.0
