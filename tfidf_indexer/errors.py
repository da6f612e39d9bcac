"""
Exceptions raised while building or persisting an index.
"""


class IndexerError(Exception):
    """Base class for all index construction errors."""


class DocumentReadError(IndexerError):
    """A single document could not be read or processed. Never fatal to a build."""


class InvariantViolation(IndexerError):
    """The index is in a state it should never reach (e.g. passes run out of order)."""


class PersistenceError(IndexerError):
    """The index could not be written to (or read back from) disk."""
