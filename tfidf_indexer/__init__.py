"""Two-pass TF-IDF index construction."""

from .posting import Posting, DirectPosting, DocumentEntry, Term
from .index import Index, IndexState, IndexStatistics
from .builder import IndexBuilder, BuildReport, DocumentOutcome
from .tokenizer import HtmlDocumentProcessor, tokenize
from .errors import IndexerError, DocumentReadError, InvariantViolation, PersistenceError
