import pytest

from tfidf_indexer.errors import InvariantViolation
from tfidf_indexer.index import Index, IndexState
from tfidf_indexer.posting import DocumentEntry, Posting, Term


def _assert_lockstep(index):
    assert len(index.vocabulary) == len(index.terms) == len(index.idf) == len(index.inverted)
    assert len(index.documents) == len(index.direct)


def test_new_index_is_empty(tmp_path):
    index = Index(tmp_path / "idx", tmp_path / "col")
    assert index.state is IndexState.EMPTY
    assert index.num_terms == 0
    assert index.num_documents == 0
    assert index.num_postings == 0
    assert index.collection_path == tmp_path / "col"
    _assert_lockstep(index)


def test_add_document_assigns_sequential_ids(tmp_path):
    index = Index(tmp_path)
    assert index.add_document("a") == 0
    assert index.add_document("b") == 1
    assert index.document(1) == DocumentEntry("b", 0.0)
    assert index.direct_postings(0) == []
    _assert_lockstep(index)


def test_term_ids_follow_first_appearance(tmp_path):
    index = Index(tmp_path)
    assert index.term_id_for("cat") == 0
    assert index.term_id_for("dog") == 1
    assert index.term_id_for("cat") == 0
    assert index.term_id_for("bird") == 2
    assert index.terms == ["cat", "dog", "bird"]
    assert index.term("dog") == Term(term_id=1, idf=0.0)
    assert index.term("fish") is None
    assert "cat" in index and "fish" not in index
    assert len(index) == 3
    _assert_lockstep(index)


def test_record_occurrence_counts_per_document(tmp_path):
    index = Index(tmp_path)
    d0 = index.add_document("d0")
    d1 = index.add_document("d1")
    cat = index.term_id_for("cat")
    index.record_occurrence(cat, d0)
    index.record_occurrence(cat, d0)
    index.record_occurrence(cat, d1)
    assert index.postings(cat) == [Posting(0, 2.0), Posting(1, 1.0)]


def test_record_occurrence_rejects_earlier_document(tmp_path):
    index = Index(tmp_path)
    d0 = index.add_document("d0")
    d1 = index.add_document("d1")
    cat = index.term_id_for("cat")
    index.record_occurrence(cat, d1)
    with pytest.raises(InvariantViolation):
        index.record_occurrence(cat, d0)


def test_record_occurrence_rejects_unknown_ids(tmp_path):
    index = Index(tmp_path)
    index.add_document("d0")
    cat = index.term_id_for("cat")
    with pytest.raises(InvariantViolation):
        index.record_occurrence(cat, 5)
    with pytest.raises(InvariantViolation):
        index.record_occurrence(7, 0)


def test_postings_accessor_returns_copy(tmp_path):
    index = Index(tmp_path)
    index.add_document("d0")
    cat = index.term_id_for("cat")
    index.record_occurrence(cat, 0)
    index.postings(cat).clear()
    assert index.num_postings == 1


def test_state_transitions_are_one_way(tmp_path):
    index = Index(tmp_path)
    with pytest.raises(InvariantViolation):
        index.advance(IndexState.WEIGHTED)
    index.advance(IndexState.RAW_FREQUENCIES)
    with pytest.raises(InvariantViolation):
        index.advance(IndexState.RAW_FREQUENCIES)
    index.advance(IndexState.WEIGHTED)
    with pytest.raises(InvariantViolation):
        index.advance(IndexState.EMPTY)


def test_first_pass_mutators_rejected_after_raw_frequencies(tmp_path):
    index = Index(tmp_path)
    index.add_document("d0")
    cat = index.term_id_for("cat")
    index.record_occurrence(cat, 0)
    index.advance(IndexState.RAW_FREQUENCIES)
    with pytest.raises(InvariantViolation):
        index.add_document("d1")
    with pytest.raises(InvariantViolation):
        index.term_id_for("dog")
    with pytest.raises(InvariantViolation):
        index.record_occurrence(cat, 0)
    # looking up an existing term is still fine
    assert index.term_id_for("cat") == cat


def test_second_pass_mutators_require_raw_frequencies(tmp_path):
    index = Index(tmp_path)
    index.add_document("d0")
    cat = index.term_id_for("cat")
    index.record_occurrence(cat, 0)
    with pytest.raises(InvariantViolation):
        index.set_idf(cat, 1.0)
    with pytest.raises(InvariantViolation):
        index.set_norm(0, 1.0)


def test_direct_postings_must_ascend(tmp_path):
    index = Index(tmp_path)
    index.add_document("d0")
    index.term_id_for("a")
    index.term_id_for("b")
    index.advance(IndexState.RAW_FREQUENCIES)
    index.add_direct_posting(0, 1, 0.5)
    with pytest.raises(InvariantViolation):
        index.add_direct_posting(0, 0, 0.5)


def test_check_invariants_detects_diverging_structures(tmp_path):
    index = Index(tmp_path)
    index.add_document("d0")
    index.record_occurrence(index.term_id_for("cat"), 0)
    index.check_invariants()
    index.idf.append(0.0)
    with pytest.raises(InvariantViolation):
        index.check_invariants()


def test_check_invariants_detects_term_without_postings(tmp_path):
    index = Index(tmp_path)
    index.add_document("d0")
    index.term_id_for("cat")
    with pytest.raises(InvariantViolation, match="no postings"):
        index.check_invariants()


def test_statistics(tmp_path):
    index = Index(tmp_path)
    index.add_document("d0")
    index.add_document("d1")
    index.record_occurrence(index.term_id_for("cat"), 0)
    index.record_occurrence(index.term_id_for("cat"), 1)
    index.record_occurrence(index.term_id_for("dog"), 1)
    stats = index.statistics()
    assert (stats.terms, stats.documents, stats.postings, stats.direct_postings) == (2, 2, 3, 0)
    assert stats.state is IndexState.EMPTY


def test_set_weight_rejects_out_of_range_positions(tmp_path):
    index = Index(tmp_path)
    index.add_document("d0")
    index.add_document("d1")
    cat = index.term_id_for("cat")
    index.record_occurrence(cat, 0)
    index.record_occurrence(cat, 1)
    index.advance(IndexState.RAW_FREQUENCIES)

    with pytest.raises(InvariantViolation):
        index.set_weight(cat, -1, 9.0)
    with pytest.raises(InvariantViolation):
        index.set_weight(cat, 2, 9.0)
    with pytest.raises(InvariantViolation):
        index.set_weight(5, 0, 9.0)
    assert index.postings(cat) == [Posting(0, 1.0), Posting(1, 1.0)]

    index.set_weight(cat, 1, 0.5)
    assert index.postings(cat)[1] == Posting(1, 0.5)
