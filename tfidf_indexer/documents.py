"""
Document collection enumeration and reading.

A collection is a directory of non-hidden subdirectories, each holding
document files with a common extension:

    collection/
        batch-a/doc1.html
        batch-a/doc2.html
        batch-b/doc3.html
"""

from pathlib import Path
from typing import Iterator

from .errors import DocumentReadError

# latin-1 decodes any byte sequence, so it must come last
ENCODINGS = ("utf-8", "cp1252", "latin-1")


def iter_document_files(root: Path, extension: str = ".html") -> Iterator[Path]:
    """
    Yield document files in a fixed, repeatable order: subdirectories sorted by
    name, then files sorted by name. Hidden top-level entries and top-level
    files are skipped; only one level of subdirectories is visited.
    """
    root = Path(root)
    try:
        subdirs = sorted(p for p in root.iterdir() if not p.name.startswith(".") and p.is_dir())
    except OSError as e:
        raise DocumentReadError(f"Could not list collection {root}: {e}") from e
    for subdir in subdirs:
        try:
            files = sorted(p for p in subdir.iterdir() if p.name.endswith(extension) and p.is_file())
        except OSError as e:
            raise DocumentReadError(f"Could not list directory {subdir}: {e}") from e
        yield from files


def document_name(filepath: Path, extension: str = ".html") -> str:
    """File name without the document extension: 'batch/doc1.html' -> 'doc1'."""
    name = Path(filepath).name
    if extension and name.endswith(extension):
        return name[: -len(extension)]
    return name


def read_document(filepath: Path) -> str:
    """
    Read document content, handling common encodings.
    """
    filepath = Path(filepath)
    try:
        raw = filepath.read_bytes()
    except OSError as e:
        raise DocumentReadError(f"Could not read {filepath}: {e}") from e
    for encoding in ENCODINGS:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise DocumentReadError(f"Could not decode file: {filepath}")
