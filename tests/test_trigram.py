from newsextract.utils.trigram import (
    MIN_SIMILARITY_PCT,
    TrigramIndex,
    build_index,
    iter_trigrams,
)


def test_iter_trigrams_pads_and_uppercases():
    assert list(iter_trigrams("ab")) == ["  A", " AB", "AB ", "B  "]


def test_every_token_is_indexed_for_each_of_its_trigrams():
    index = TrigramIndex.build(["AUTHOR", "BYLINE"])
    author_id = index.tokens.index("AUTHOR")

    for trigram in iter_trigrams("AUTHOR"):
        assert author_id in index.token_ids_for(trigram)
    assert "  a" in index
    assert index.trigram_total(author_id) == 8


def test_duplicate_vocabulary_entries_are_ignored():
    index = TrigramIndex.build(["AUTHOR", "author", "AUTHOR"])
    assert len(index) == 1


def test_exact_match_scores_one_hundred():
    index = TrigramIndex.build(["AUTHOR", "BYLINE"])
    results = index.score("author")

    assert results[0].token == "AUTHOR"
    assert results[0].matches == 8
    assert results[0].similarity == 100
    assert [match.token for match in results] == ["AUTHOR"]


def test_partial_match_uses_half_up_rounding():
    index = TrigramIndex.build(["AUTHOR"])
    # "autho" shares 5 of AUTHOR's 8 trigrams: 62.5%.
    assert index.score("autho")[0].similarity == 63


def test_matches_below_floor_are_dropped():
    index = TrigramIndex.build(["AUTHOR"])

    assert index.score("auth")[0].similarity == 50
    assert MIN_SIMILARITY_PCT == 49
    assert index.score("aut") == []
    assert index.best_similarity("aut") == 0


def test_results_sorted_by_raw_match_count():
    index = TrigramIndex.build(["AUTHOR", "AUTHORS"])
    results = index.score("authors")

    assert [match.token for match in results] == ["AUTHORS", "AUTHOR"]
    assert results[0].matches == 9
    assert results[1].matches == 6


def test_compound_attribute_value_still_matches():
    index = TrigramIndex.build(["AUTHOR", "BYLINE"])
    assert index.best_similarity("post-author") == 75


def test_empty_candidate_scores_nothing():
    index = TrigramIndex.build(["AUTHOR"])
    assert index.score("") == []
    assert index.score("   ") == []
    assert index.score(None) == []


def test_build_index_is_shared_per_vocabulary():
    first = build_index(["COMMENT", "FOOTER"])
    second = build_index(("COMMENT", "FOOTER"))
    assert first is second
