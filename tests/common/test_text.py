"""
Unit Tests for Text Matching

Tests for normalize_key, levenshtein and similarity.
"""

import pytest

from paper_importer.common.rounding import round_half_up
from paper_importer.common.text import (
    CONTAINMENT_SCORE,
    levenshtein,
    normalize_key,
    similarity,
)


class TestNormalizeKey:
    """Tests for normalize_key function."""

    def test_normalize_when_punctuation_and_case_then_stripped(self):
        assert normalize_key("  Cambridge International (CIE) ") == "cambridgeinternationalcie"
        assert normalize_key("A-Level") == "alevel"

    def test_normalize_when_none_or_empty_then_empty(self):
        assert normalize_key(None) == ""
        assert normalize_key("") == ""


class TestLevenshtein:
    """Tests for levenshtein function."""

    @pytest.mark.parametrize("a,b,expected", [
        ("kitten", "sitting", 3),
        ("", "abc", 3),
        ("abc", "", 3),
        ("same", "same", 0),
        ("flaw", "lawn", 2),
    ])
    def test_levenshtein_when_pairs_then_expected_distance(self, a, b, expected):
        assert levenshtein(a, b) == expected
        assert levenshtein(b, a) == expected


class TestSimilarity:
    """Tests for similarity function."""

    @pytest.mark.parametrize("value", ["Cambridge", "IGCSE", "", "0625", "A Level"])
    def test_similarity_when_same_input_then_one(self, value):
        """Every label is identical to itself, including the empty label."""
        assert similarity(value, value) == 1.0

    @pytest.mark.parametrize("a,b", [
        ("Cambridge", "Edexcel"),
        ("cie", "Cambridge International (CIE)"),
        ("Physics", "Chemistry"),
        ("", "AQA"),
        ("igcse", "gcse"),
    ])
    def test_similarity_when_swapped_then_symmetric(self, a, b):
        assert similarity(a, b) == similarity(b, a)

    def test_similarity_when_case_and_spacing_differ_then_one(self):
        assert similarity("Cambridge", "cambridge ") == 1.0

    def test_similarity_when_one_side_empty_then_zero(self):
        assert similarity("", "AQA") == 0.0
        assert similarity(None, "AQA") == 0.0

    def test_similarity_when_containment_then_fixed_score(self):
        """Containment scores the same regardless of length ratio."""
        assert similarity("cie", "Cambridge International (CIE)") == CONTAINMENT_SCORE
        assert similarity("gcse", "igcse") == CONTAINMENT_SCORE

    def test_similarity_when_edit_distance_then_proportional(self):
        # "ocr" vs "aqa": distance 3 over length 3
        assert similarity("ocr", "aqa") == 0.0
        # "kitten" vs "sitting": (7 - 3) / 7
        assert similarity("kitten", "sitting") == pytest.approx(4 / 7)

    def test_similarity_when_any_pair_then_within_unit_interval(self):
        for a, b in [("x", "yyyyyyyy"), ("physics", "chemistry"), ("ab", "ba")]:
            assert 0.0 <= similarity(a, b) <= 1.0


class TestRoundHalfUp:
    """Tests for round_half_up function."""

    @pytest.mark.parametrize("value,expected", [
        (62.5, 63),
        (66.666, 67),
        (33.333, 33),
        (0.0, 0),
        (100.0, 100),
        (12.5, 13),
    ])
    def test_round_when_values_then_halves_go_up(self, value, expected):
        assert round_half_up(value) == expected
