"""
Index data model: vocabulary, inverted index, direct index and document table.

Terms and documents are identified by sequential integer ids that double as
positions in the arrays below:

    vocabulary: term text -> term_id
    terms[term_id]     -> term text
    idf[term_id]       -> inverse document frequency (0.0 until the second pass)
    inverted[term_id]  -> [Posting(doc_id, weight), ...]   (ascending doc_id)
    documents[doc_id]  -> DocumentEntry(name, norm)
    direct[doc_id]     -> [DirectPosting(term_id, weight), ...]   (ascending term_id)

The index is only mutated by the builder and moves through three states:
EMPTY (being filled by the first pass) -> RAW_FREQUENCIES -> WEIGHTED.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from . import storage
from .errors import InvariantViolation, PersistenceError
from .log import logger
from .posting import DirectPosting, DocumentEntry, Posting, Term


class IndexState(enum.Enum):
    EMPTY = "empty"
    RAW_FREQUENCIES = "raw_frequencies"
    WEIGHTED = "weighted"


_NEXT_STATE = {
    IndexState.EMPTY: IndexState.RAW_FREQUENCIES,
    IndexState.RAW_FREQUENCIES: IndexState.WEIGHTED,
}


@dataclass(frozen=True)
class IndexStatistics:
    terms: int
    documents: int
    postings: int
    direct_postings: int
    state: IndexState


class Index:
    def __init__(self, index_path: Path | str, collection_path: Path | str | None = None) -> None:
        self.index_path = Path(index_path)
        self.collection_path = Path(collection_path) if collection_path is not None else None
        self.state = IndexState.EMPTY

        self.vocabulary: dict[str, int] = {}
        self.terms: list[str] = []
        self.idf: list[float] = []
        self.inverted: list[list[Posting]] = []
        self.documents: list[DocumentEntry] = []
        self.direct: list[list[DirectPosting]] = []

    # ---------- state machine ----------
    def require_state(self, expected: IndexState) -> None:
        if self.state is not expected:
            raise InvariantViolation(
                f"Index is in state {self.state.value!r}, expected {expected.value!r}"
            )

    def advance(self, target: IndexState) -> None:
        """Move to the next state. Transitions are one-way and cannot skip a state."""
        if _NEXT_STATE.get(self.state) is not target:
            raise InvariantViolation(
                f"Illegal transition {self.state.value!r} -> {target.value!r}"
            )
        self.state = target

    # ---------- first pass ----------
    def add_document(self, name: str) -> int:
        """Register a document and return its sequential id."""
        self.require_state(IndexState.EMPTY)
        doc_id = len(self.documents)
        self.documents.append(DocumentEntry(name=name, norm=0.0))
        self.direct.append([])
        return doc_id

    def term_id_for(self, term: str) -> int:
        """Return the id of term, allocating the next one on first sight."""
        term_id = self.vocabulary.get(term)
        if term_id is not None:
            return term_id
        self.require_state(IndexState.EMPTY)
        term_id = len(self.terms)
        self.vocabulary[term] = term_id
        self.terms.append(term)
        self.idf.append(0.0)
        self.inverted.append([])
        return term_id

    def record_occurrence(self, term_id: int, doc_id: int) -> None:
        """
        Count one occurrence of term_id in doc_id.

        Documents are fed in id order and never revisited, so the document can
        only be the last one in the list or a new, larger id.
        """
        self.require_state(IndexState.EMPTY)
        self._check_term_id(term_id)
        self._check_doc_id(doc_id)
        plist = self.inverted[term_id]
        if not plist or plist[-1].doc_id != doc_id:
            if plist and plist[-1].doc_id > doc_id:
                raise InvariantViolation(
                    f"Document {doc_id} arrived after document {plist[-1].doc_id} "
                    f"for term {self.terms[term_id]!r}"
                )
            plist.append(Posting(doc_id=doc_id, weight=0.0))
        last = plist[-1]
        plist[-1] = Posting(doc_id=last.doc_id, weight=last.weight + 1.0)

    # ---------- second pass ----------
    def set_idf(self, term_id: int, idf: float) -> None:
        self.require_state(IndexState.RAW_FREQUENCIES)
        self._check_term_id(term_id)
        self.idf[term_id] = idf

    def set_weight(self, term_id: int, position: int, weight: float) -> None:
        self.require_state(IndexState.RAW_FREQUENCIES)
        self._check_term_id(term_id)
        plist = self.inverted[term_id]
        if not 0 <= position < len(plist):
            raise InvariantViolation(
                f"Posting position {position} out of range [0, {len(plist)}) "
                f"for term {self.terms[term_id]!r}"
            )
        plist[position] = Posting(doc_id=plist[position].doc_id, weight=weight)

    def add_direct_posting(self, doc_id: int, term_id: int, weight: float) -> None:
        self.require_state(IndexState.RAW_FREQUENCIES)
        self._check_doc_id(doc_id)
        dlist = self.direct[doc_id]
        if dlist and dlist[-1].term_id >= term_id:
            raise InvariantViolation(
                f"Direct list of document {doc_id} must grow by ascending term id"
            )
        dlist.append(DirectPosting(term_id=term_id, weight=weight))

    def set_norm(self, doc_id: int, norm: float) -> None:
        self.require_state(IndexState.RAW_FREQUENCIES)
        self._check_doc_id(doc_id)
        self.documents[doc_id] = DocumentEntry(name=self.documents[doc_id].name, norm=norm)

    # ---------- accessors ----------
    def term(self, text: str) -> Term | None:
        term_id = self.vocabulary.get(text)
        if term_id is None:
            return None
        return Term(term_id=term_id, idf=self.idf[term_id])

    def postings(self, term_id: int) -> list[Posting]:
        self._check_term_id(term_id)
        return list(self.inverted[term_id])

    def direct_postings(self, doc_id: int) -> list[DirectPosting]:
        self._check_doc_id(doc_id)
        return list(self.direct[doc_id])

    def document(self, doc_id: int) -> DocumentEntry:
        self._check_doc_id(doc_id)
        return self.documents[doc_id]

    def iter_terms(self) -> Iterator[tuple[int, str]]:
        """Iterate (term_id, text) in id order."""
        return enumerate(self.terms)

    @property
    def num_terms(self) -> int:
        return len(self.terms)

    @property
    def num_documents(self) -> int:
        return len(self.documents)

    @property
    def num_postings(self) -> int:
        return sum(len(plist) for plist in self.inverted)

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term: str) -> bool:
        return term in self.vocabulary

    # ---------- invariants & reporting ----------
    def _check_term_id(self, term_id: int) -> None:
        if not 0 <= term_id < len(self.inverted):
            raise InvariantViolation(f"Term id {term_id} out of range [0, {len(self.inverted)})")

    def _check_doc_id(self, doc_id: int) -> None:
        if not 0 <= doc_id < len(self.documents):
            raise InvariantViolation(f"Document id {doc_id} out of range [0, {len(self.documents)})")

    def check_invariants(self) -> None:
        """Raise InvariantViolation if the structures disagree with each other."""
        n_terms = len(self.terms)
        if not (len(self.vocabulary) == n_terms == len(self.idf) == len(self.inverted)):
            raise InvariantViolation(
                f"Term structures out of step: vocabulary={len(self.vocabulary)} "
                f"terms={n_terms} idf={len(self.idf)} inverted={len(self.inverted)}"
            )
        n_docs = len(self.documents)
        if len(self.direct) != n_docs:
            raise InvariantViolation(
                f"Document structures out of step: documents={n_docs} direct={len(self.direct)}"
            )
        for text, term_id in self.vocabulary.items():
            if not 0 <= term_id < n_terms or self.terms[term_id] != text:
                raise InvariantViolation(f"Vocabulary entry {text!r} -> {term_id} is inconsistent")
        for term_id, plist in enumerate(self.inverted):
            if not plist:
                raise InvariantViolation(f"Term {self.terms[term_id]!r} has no postings")
            previous = -1
            for p in plist:
                if not previous < p.doc_id < n_docs:
                    raise InvariantViolation(
                        f"Postings of term {self.terms[term_id]!r} are not strictly "
                        f"ascending valid document ids"
                    )
                previous = p.doc_id
        for doc_id, dlist in enumerate(self.direct):
            previous = -1
            for dp in dlist:
                if not previous < dp.term_id < n_terms:
                    raise InvariantViolation(
                        f"Direct postings of document {doc_id} are not strictly "
                        f"ascending valid term ids"
                    )
                previous = dp.term_id

    def statistics(self) -> IndexStatistics:
        return IndexStatistics(
            terms=self.num_terms,
            documents=self.num_documents,
            postings=self.num_postings,
            direct_postings=sum(len(dlist) for dlist in self.direct),
            state=self.state,
        )

    def log_statistics(self) -> None:
        stats = self.statistics()
        logger.info("Index statistics:")
        logger.info("  - Terms: %d", stats.terms)
        logger.info("  - Documents: %d", stats.documents)
        logger.info("  - Postings: %d", stats.postings)
        logger.info("  - Direct postings: %d", stats.direct_postings)
        logger.info("  - State: %s", stats.state.value)

    # ---------- persistence ----------
    def save(self) -> None:
        """Write all structures to index_path. Raises PersistenceError on I/O failure."""
        self.check_invariants()
        storage.write_index(
            self.index_path,
            collection=str(self.collection_path) if self.collection_path is not None else None,
            state=self.state.value,
            terms=self.terms,
            idf=self.idf,
            inverted=self.inverted,
            documents=self.documents,
            direct=self.direct,
        )

    @classmethod
    def load(cls, index_path: Path | str) -> "Index":
        """Reload a saved index. The result is meant for reading only."""
        data = storage.read_index(index_path)
        index = cls(index_path, data.collection)
        try:
            index.state = IndexState(data.state)
        except ValueError as e:
            raise PersistenceError(f"Unknown index state {data.state!r} in {index_path}") from e
        index.terms = data.terms
        index.vocabulary = {text: term_id for term_id, text in enumerate(data.terms)}
        index.idf = data.idf
        index.inverted = data.inverted
        index.documents = data.documents
        index.direct = data.direct
        try:
            index.check_invariants()
        except InvariantViolation as e:
            raise PersistenceError(f"Corrupt index at {index_path}: {e}") from e
        return index
