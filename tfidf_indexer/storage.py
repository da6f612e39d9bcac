"""
On-disk layout of a saved index.

An index directory holds:
    meta.json              {"format", "collection", "state", "num_terms", "num_documents", "num_postings"}
    vocabulary.jsonl       {"term": str, "term_id": int, "idf": float}        one line per term id
    inverted.jsonl         {"term_id": int, "postings": [[doc_id, weight], ...]}   one line per term id
    inverted_lexicon.json  {term: byte offset of its line in inverted.jsonl}
    direct.jsonl           {"doc_id": int, "postings": [[term_id, weight], ...]}   one line per doc id
    documents.json         [[name, norm], ...]                               ordered by doc id

json writes floats with repr() precision, so weights and norms round-trip exactly.
meta.json is written last; a directory without it is an incomplete index.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from .errors import PersistenceError
from .posting import DirectPosting, DocumentEntry, Posting

FORMAT_VERSION = 1

META_FILE = "meta.json"
VOCABULARY_FILE = "vocabulary.jsonl"
INVERTED_FILE = "inverted.jsonl"
LEXICON_FILE = "inverted_lexicon.json"
DIRECT_FILE = "direct.jsonl"
DOCUMENTS_FILE = "documents.json"


@dataclass
class StoredIndex:
    collection: str | None
    state: str
    terms: list[str]
    idf: list[float]
    inverted: list[list[Posting]]
    documents: list[DocumentEntry]
    direct: list[list[DirectPosting]]


def write_index(
    index_dir: Path,
    *,
    collection: str | None,
    state: str,
    terms: list[str],
    idf: list[float],
    inverted: list[list[Posting]],
    documents: list[DocumentEntry],
    direct: list[list[DirectPosting]],
) -> None:
    index_dir = Path(index_dir)
    try:
        index_dir.mkdir(parents=True, exist_ok=True)
        # Remove a stale marker first so a failed write never looks complete.
        (index_dir / META_FILE).unlink(missing_ok=True)

        with open(index_dir / VOCABULARY_FILE, "w", encoding="utf-8") as f:
            for term_id, term in enumerate(terms):
                line = {"term": term, "term_id": term_id, "idf": idf[term_id]}
                f.write(json.dumps(line, ensure_ascii=False) + "\n")

        lexicon: dict[str, int] = {}
        with open(index_dir / INVERTED_FILE, "w", encoding="utf-8") as f:
            for term_id, plist in enumerate(inverted):
                lexicon[terms[term_id]] = f.tell()
                line = {
                    "term_id": term_id,
                    "postings": [[p.doc_id, p.weight] for p in plist],
                }
                f.write(json.dumps(line, ensure_ascii=False) + "\n")
        with open(index_dir / LEXICON_FILE, "w", encoding="utf-8") as f:
            json.dump(lexicon, f, ensure_ascii=False)

        with open(index_dir / DIRECT_FILE, "w", encoding="utf-8") as f:
            for doc_id, dlist in enumerate(direct):
                line = {
                    "doc_id": doc_id,
                    "postings": [[dp.term_id, dp.weight] for dp in dlist],
                }
                f.write(json.dumps(line) + "\n")

        with open(index_dir / DOCUMENTS_FILE, "w", encoding="utf-8") as f:
            json.dump([[d.name, d.norm] for d in documents], f, ensure_ascii=False)

        meta = {
            "format": FORMAT_VERSION,
            "collection": collection,
            "state": state,
            "num_terms": len(terms),
            "num_documents": len(documents),
            "num_postings": sum(len(plist) for plist in inverted),
        }
        with open(index_dir / META_FILE, "w", encoding="utf-8") as f:
            json.dump(meta, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise PersistenceError(f"Could not write index to {index_dir}: {e}") from e


def _read_jsonl(path: Path) -> list[dict]:
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def read_index(index_dir: Path | str) -> StoredIndex:
    index_dir = Path(index_dir)
    try:
        with open(index_dir / META_FILE, "r", encoding="utf-8") as f:
            meta = json.load(f)
        if meta.get("format") != FORMAT_VERSION:
            raise PersistenceError(f"Unsupported index format {meta.get('format')!r} in {index_dir}")

        vocab_lines = _read_jsonl(index_dir / VOCABULARY_FILE)
        terms = [str(obj["term"]) for obj in vocab_lines]
        idf = [float(obj["idf"]) for obj in vocab_lines]
        if [int(obj["term_id"]) for obj in vocab_lines] != list(range(len(terms))):
            raise PersistenceError(f"Vocabulary in {index_dir} is not ordered by term id")

        inverted_lines = _read_jsonl(index_dir / INVERTED_FILE)
        inverted = [
            [Posting(doc_id=int(doc_id), weight=float(weight)) for doc_id, weight in obj["postings"]]
            for obj in inverted_lines
        ]

        direct_lines = _read_jsonl(index_dir / DIRECT_FILE)
        direct = [
            [DirectPosting(term_id=int(term_id), weight=float(weight)) for term_id, weight in obj["postings"]]
            for obj in direct_lines
        ]

        with open(index_dir / DOCUMENTS_FILE, "r", encoding="utf-8") as f:
            documents = [DocumentEntry(name=str(name), norm=float(norm)) for name, norm in json.load(f)]

        if len(terms) != meta["num_terms"] or len(documents) != meta["num_documents"]:
            raise PersistenceError(f"Index in {index_dir} does not match its meta.json counts")
        state = str(meta["state"])
    except OSError as e:
        raise PersistenceError(f"Could not read index from {index_dir}: {e}") from e
    except (KeyError, TypeError, ValueError) as e:
        raise PersistenceError(f"Malformed index in {index_dir}: {e}") from e

    return StoredIndex(
        collection=meta.get("collection"),
        state=state,
        terms=terms,
        idf=idf,
        inverted=inverted,
        documents=documents,
        direct=direct,
    )


def read_term_postings(index_dir: Path | str, term: str) -> list[Posting]:
    """
    Return one term's postings by seeking through the lexicon, without loading
    the rest of the inverted index. Unknown terms give [].
    """
    index_dir = Path(index_dir)
    try:
        with open(index_dir / LEXICON_FILE, "r", encoding="utf-8") as f:
            lexicon: dict[str, int] = json.load(f)
        offset = lexicon.get(term)
        if offset is None:
            return []
        with open(index_dir / INVERTED_FILE, "r", encoding="utf-8") as f:
            f.seek(offset)
            obj = json.loads(f.readline())
    except OSError as e:
        raise PersistenceError(f"Could not read postings from {index_dir}: {e}") from e
    except (KeyError, ValueError) as e:
        raise PersistenceError(f"Malformed index in {index_dir}: {e}") from e
    return [Posting(doc_id=int(doc_id), weight=float(weight)) for doc_id, weight in obj["postings"]]
