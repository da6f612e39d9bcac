"""
Two-pass index construction.

First pass: read every document of the collection, register it, and count raw
term frequencies into the inverted index.
Second pass: per term, compute idf = ln(1 + N / df), turn raw frequencies into
weights w = idf * (1 + ln(tf)), accumulate squared weights per document,
derive the direct index, and finally take the square root of every norm.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .documents import document_name, iter_document_files, read_document
from .errors import DocumentReadError, InvariantViolation
from .index import Index, IndexState, IndexStatistics
from .log import logger
from .tokenizer import DocumentProcessor, HtmlDocumentProcessor


@dataclass(frozen=True)
class DocumentOutcome:
    """
    What happened to one document in the first pass.
    doc_id is None when the document was never registered (read failure);
    error is set whenever the document contributed no postings because of a failure.
    """

    path: Path
    name: str
    doc_id: int | None
    n_bytes: int = 0
    n_tokens: int = 0
    error: str | None = None

    @property
    def skipped(self) -> bool:
        return self.error is not None


@dataclass
class PassOneSummary:
    outcomes: list[DocumentOutcome] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def documents(self) -> int:
        """Documents that received a doc id (including empty or failed-to-process ones)."""
        return sum(1 for o in self.outcomes if o.doc_id is not None)

    @property
    def skipped(self) -> list[DocumentOutcome]:
        return [o for o in self.outcomes if o.skipped]

    @property
    def total_bytes(self) -> int:
        return sum(o.n_bytes for o in self.outcomes)

    @property
    def total_tokens(self) -> int:
        return sum(o.n_tokens for o in self.outcomes)

    @property
    def megabytes(self) -> float:
        return self.total_bytes / 1024 / 1024

    @property
    def throughput(self) -> float:
        """MB/s; 0.0 when the pass took no measurable time."""
        return self.megabytes / self.elapsed if self.elapsed > 0 else 0.0


@dataclass(frozen=True)
class PassTwoSummary:
    terms: int
    postings: int
    elapsed: float


@dataclass(frozen=True)
class BuildReport:
    index: Index
    first_pass: PassOneSummary
    second_pass: PassTwoSummary
    statistics: IndexStatistics


class IndexBuilder:
    """
    Builds an index over the collection at collection_path and saves it to index_path.

    processor turns raw document text into terms; reader loads a document file
    and raises DocumentReadError when it cannot.
    """

    def __init__(
        self,
        index_path: Path | str,
        collection_path: Path | str,
        processor: DocumentProcessor | None = None,
        *,
        reader: Callable[[Path], str] = read_document,
        extension: str = ".html",
    ) -> None:
        self.index_path = Path(index_path)
        self.collection_path = Path(collection_path)
        self.processor = processor if processor is not None else HtmlDocumentProcessor()
        self.reader = reader
        self.extension = extension

    def run(self) -> BuildReport:
        """Run both passes and save the index."""
        index = Index(self.index_path, self.collection_path)
        first = self.first_pass(index)
        second = self.second_pass(index)

        logger.info("Saving index to %s...", self.index_path)
        index.save()
        logger.info("...done.")
        index.log_statistics()
        return BuildReport(
            index=index,
            first_pass=first,
            second_pass=second,
            statistics=index.statistics(),
        )

    # ---------- first pass ----------
    def first_pass(self, index: Index) -> PassOneSummary:
        """
        Populate vocabulary, documents and raw-frequency postings.
        Per-document failures are recorded in the summary and do not stop the pass.
        """
        index.require_state(IndexState.EMPTY)
        summary = PassOneSummary()
        start = time.perf_counter()

        logger.info("Running first pass over %s...", self.collection_path)
        for filepath in iter_document_files(self.collection_path, self.extension):
            outcome = self.process_document(filepath, index)
            if outcome.skipped:
                logger.warning("  Skipped %s: %s", filepath.name, outcome.error)
            else:
                logger.debug("  Indexed %s (%d tokens)", filepath.name, outcome.n_tokens)
            summary.outcomes.append(outcome)

        summary.elapsed = time.perf_counter() - start
        index.advance(IndexState.RAW_FREQUENCIES)

        logger.info("...done:")
        logger.info(
            "  - Documents: %d (%.2f MB), skipped: %d.",
            summary.documents, summary.megabytes, len(summary.skipped),
        )
        logger.info("  - Time: %.2f seconds.", summary.elapsed)
        logger.info("  - Throughput: %.2f MB/s.", summary.throughput)
        return summary

    def process_document(self, filepath: Path, index: Index) -> DocumentOutcome:
        """
        Read one document, register it and count its terms into the index.

        The document is registered after reading but before processing, so a
        processing failure leaves its doc id in place with no postings.
        """
        name = document_name(filepath, self.extension)
        try:
            content = self.reader(filepath)
        except DocumentReadError as e:
            return DocumentOutcome(path=filepath, name=name, doc_id=None, error=str(e))
        n_bytes = len(content.encode("utf-8"))

        doc_id = index.add_document(name)
        try:
            tokens = self.processor.process_text(content)
        except DocumentReadError as e:
            return DocumentOutcome(path=filepath, name=name, doc_id=doc_id, n_bytes=n_bytes, error=str(e))
        if not tokens:
            return DocumentOutcome(path=filepath, name=name, doc_id=doc_id, n_bytes=n_bytes)

        for token in tokens:
            index.record_occurrence(index.term_id_for(token), doc_id)
        return DocumentOutcome(
            path=filepath, name=name, doc_id=doc_id, n_bytes=n_bytes, n_tokens=len(tokens)
        )

    # ---------- second pass ----------
    def second_pass(self, index: Index) -> PassTwoSummary:
        """Compute idf, tf-idf weights, the direct index and document norms."""
        index.require_state(IndexState.RAW_FREQUENCIES)
        start = time.perf_counter()
        n_docs = index.num_documents
        squared = [0.0] * n_docs

        logger.info("Running second pass...")
        logger.info("  Updating term weights and direct index...")
        for term_id in range(index.num_terms):
            plist = index.inverted[term_id]
            ct = len(plist)
            if ct == 0:
                raise InvariantViolation(f"Term {index.terms[term_id]!r} has no postings")
            idf = math.log(1.0 + n_docs / ct)
            index.set_idf(term_id, idf)
            for position, posting in enumerate(plist):
                weight = idf * (1.0 + math.log(posting.weight))
                index.set_weight(term_id, position, weight)
                squared[posting.doc_id] += weight * weight

        # Ascending term_id order keeps every direct list sorted by term id.
        n_postings = 0
        for term_id in range(index.num_terms):
            for posting in index.inverted[term_id]:
                index.add_direct_posting(posting.doc_id, term_id, posting.weight)
                n_postings += 1

        logger.info("  Updating document norms...")
        for doc_id in range(n_docs):
            index.set_norm(doc_id, math.sqrt(squared[doc_id]))

        index.advance(IndexState.WEIGHTED)
        elapsed = time.perf_counter() - start
        logger.info("...done")
        logger.info("  - Time: %.2f seconds.", elapsed)
        return PassTwoSummary(terms=index.num_terms, postings=n_postings, elapsed=elapsed)
