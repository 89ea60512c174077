"""Tests for property-name fuzzy matching."""

import pytest

from app.core.string_match import (
    PROPERTY_WEIGHTS,
    combined_match,
    expand_abbreviations,
    jaro_winkler_similarity,
    levenshtein_similarity,
    match_property_names,
    ngram_similarity,
    normalize_text,
    partial_similarity,
    remove_accents,
)


class TestNormalization:
    """Tests for text normalisation before comparison."""

    def test_remove_accents(self) -> None:
        assert remove_accents("São João à Sé") == "Sao Joao a Se"

    def test_expand_abbreviations(self) -> None:
        assert expand_abbreviations("apt 3 av liberdade") == "apartamento 3 avenida liberdade"

    def test_normalize_text(self) -> None:
        assert normalize_text("  Apt. São João,  2 ") == "apartamento sao joao 2"

    def test_normalize_keeps_unknown_words(self) -> None:
        assert normalize_text("Villa Aroeira") == "villa aroeira"


class TestAlgorithms:
    """Tests for the individual similarity measures."""

    def test_levenshtein_similarity_edit_ratio(self) -> None:
        # kitten -> sitting takes three edits over seven characters
        assert levenshtein_similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)

    def test_levenshtein_similarity_bounds(self) -> None:
        assert levenshtein_similarity("casa", "casa") == 1.0
        assert levenshtein_similarity("", "") == 1.0
        assert levenshtein_similarity("abc", "xyz") == 0.0

    def test_jaro_winkler_classic_pair(self) -> None:
        assert jaro_winkler_similarity("martha", "marhta") == pytest.approx(0.9611, abs=1e-3)

    def test_jaro_winkler_no_common_characters(self) -> None:
        assert jaro_winkler_similarity("abc", "xyz") == 0.0

    def test_ngram_similarity_identical(self) -> None:
        assert ngram_similarity("praia", "praia") == 1.0

    def test_ngram_similarity_disjoint(self) -> None:
        assert ngram_similarity("abcd", "wxyz") == 0.0

    def test_partial_similarity_substring(self) -> None:
        assert partial_similarity("casa", "casa da praia") == 1.0

    def test_partial_similarity_unrelated(self) -> None:
        assert partial_similarity("loft", "quinta") < 0.5

    def test_jaro_winkler_prefix_boost(self) -> None:
        assert jaro_winkler_similarity("praia", "praiaz") > jaro_winkler_similarity(
            "praia", "zpraia"
        )


class TestCombinedMatch:
    """Tests for the weighted combination of measures."""

    def test_identical_names_score_one(self) -> None:
        result = combined_match("Casa da Praia", "casa da praia")
        assert result.overall_score == pytest.approx(1.0)
        assert result.is_high_confidence

    def test_short_strings_score_zero(self) -> None:
        result = combined_match("a", "abc")
        assert result.overall_score == 0.0
        assert not result.is_medium_confidence

    def test_abbreviated_name_matches(self) -> None:
        result = combined_match("Apt. São João", "Apartamento Sao Joao", PROPERTY_WEIGHTS)
        assert result.is_high_confidence

    def test_unrelated_names_are_low_confidence(self) -> None:
        result = combined_match("Quinta do Lago", "Loft Moderno", PROPERTY_WEIGHTS)
        assert not result.is_medium_confidence


class TestMatchPropertyNames:
    """Tests for ranking catalogue names."""

    def test_best_candidate_first(self) -> None:
        candidates = ["Loft Moderno", "Apartamento Sé", "Casa da Praia"]
        matches = match_property_names("Apt Se", candidates)
        assert matches[0].candidate == "Apartamento Sé"
        assert matches[0].index == 1
        assert matches[0].result.is_medium_confidence

    def test_scores_are_sorted(self) -> None:
        matches = match_property_names("casa", ["Casa da Praia", "Casa de Campo", "Loft"])
        scores = [m.result.overall_score for m in matches]
        assert scores == sorted(scores, reverse=True)
