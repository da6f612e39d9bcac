"""
Build the TF-IDF index and print analytics.

Usage:
    python build_index.py --collection data/collection --index data/index

Put the document collection (one level of subdirectories holding .html files)
into data/collection/, then run this script.

Output (in data/index/ by default):
  - vocabulary.jsonl, inverted.jsonl, inverted_lexicon.json
  - direct.jsonl, documents.json, meta.json
  - Analytics table printed to console
"""

import sys

from tfidf_indexer.cli import main

if __name__ == "__main__":
    sys.exit(main())
