"""
Build a TF-IDF index over a document collection.

Usage (from repo root):
    python -m tfidf_indexer.cli --collection data/collection --index data/index
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable

from . import config
from .builder import IndexBuilder
from .errors import IndexerError
from .log import LOG_LEVELS, configure_logging
from .tokenizer import HtmlDocumentProcessor


def _directory_size(path: Path) -> int:
    return sum(p.stat().st_size for p in path.iterdir() if p.is_file())


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build a TF-IDF inverted/direct index.")
    parser.add_argument(
        "--collection",
        type=Path,
        default=Path(config.COLLECTION_DIR),
        help="Path to the document collection (default: %(default)s)",
    )
    parser.add_argument(
        "--index",
        type=Path,
        default=Path(config.INDEX_DIR),
        help="Output directory for the index (default: %(default)s)",
    )
    parser.add_argument(
        "--extension",
        default=config.DOC_EXTENSION,
        help="Extension of document files (default: %(default)s)",
    )
    parser.add_argument(
        "--no-stemming",
        action="store_true",
        help="Index unstemmed tokens",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=config.LOG_LEVEL,
        help="Logging level (default: %(default)s)",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    configure_logging(args.log_level)

    if not args.collection.is_dir():
        print(f"Collection folder not found: {args.collection}", file=sys.stderr)
        return 1

    processor = HtmlDocumentProcessor(
        use_stemming=config.USE_STEMMING and not args.no_stemming,
        min_length=config.MIN_TOKEN_LENGTH,
    )
    builder = IndexBuilder(args.index, args.collection, processor, extension=args.extension)
    try:
        report = builder.run()
    except IndexerError as e:
        print(f"Index build failed: {e}", file=sys.stderr)
        return 1

    stats = report.statistics
    index_size_kb = _directory_size(args.index) / 1024

    print("\n" + "=" * 50)
    print("INDEX ANALYTICS")
    print("=" * 50)
    print()
    print("| Metric                      | Value |")
    print("|-----------------------------|-------|")
    print(f"| Number of indexed documents | {stats.documents} |")
    print(f"| Number of skipped documents | {len(report.first_pass.skipped)} |")
    print(f"| Number of unique terms      | {stats.terms} |")
    print(f"| Number of postings          | {stats.postings} |")
    print(f"| Total size of index (KB)    | {index_size_kb:.2f} |")
    print()
    print("=" * 50)
    print(f"\nIndex saved to: {args.index}")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
