from pathlib import Path

import pytest

from tfidf_indexer.errors import DocumentReadError
from tfidf_indexer.log import logger


class SplitProcessor:
    """Whitespace tokenizer: keeps tests independent of HTML parsing and stemming."""

    def process_text(self, raw_text):
        tokens = raw_text.split()
        return tokens or None


class FailingProcessor(SplitProcessor):
    def __init__(self, bad_marker="UNPARSEABLE"):
        self.bad_marker = bad_marker

    def process_text(self, raw_text):
        if self.bad_marker in raw_text:
            raise DocumentReadError("could not process document")
        return super().process_text(raw_text)


def write_collection(root: Path, docs: dict[str, dict[str, str]]) -> Path:
    """docs: {subdir: {filename: content}}"""
    root.mkdir(parents=True, exist_ok=True)
    for subdir, files in docs.items():
        (root / subdir).mkdir(parents=True, exist_ok=True)
        for filename, content in files.items():
            (root / subdir / filename).write_text(content, encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def detach_log_handlers():
    yield
    for h in list(logger.handlers):
        logger.removeHandler(h)


@pytest.fixture
def processor():
    return SplitProcessor()


@pytest.fixture
def scenario_collection(tmp_path):
    return write_collection(
        tmp_path / "collection",
        {
            "batch": {
                "doc0.html": "cat dog cat",
                "doc1.html": "dog bird",
                "doc2.html": "cat",
            }
        },
    )


@pytest.fixture
def larger_collection(tmp_path):
    return write_collection(
        tmp_path / "collection",
        {
            "a": {
                "d1.html": "the quick brown fox jumps over the lazy dog",
                "d2.html": "the dog barks the dog bites the dog sleeps",
            },
            "b": {
                "d3.html": "quick quick quick",
                "d4.html": "brown paper bag",
                "d5.html": "lazy afternoon with the fox and the dog",
            },
        },
    )
