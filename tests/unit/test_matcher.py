"""Unit tests for term matching and highlighting."""

import pytest

from glossary_search.core.exceptions import InvalidSearchOptionError
from glossary_search.core.matcher import HighlightFormat, TermMatcher, order_candidates


class TestTermMatcher:
    """Test cases for the TermMatcher class."""

    @pytest.fixture
    def matcher(self):
        return TermMatcher()

    @pytest.fixture
    def candidates(self, make_candidate):
        """API, API Gateway and a few punctuation-bearing terms."""
        return [
            make_candidate("API", definitions=["Application Programming Interface"]),
            make_candidate("API Gateway", definitions=["Entry point for API calls"]),
            make_candidate("CI/CD", definitions=["Continuous Integration/Delivery"]),
            make_candidate("C++", definitions=["A programming language"]),
            make_candidate("ROI", dictionary="Business", definitions=["Return on Investment"]),
        ]

    def test_single_match_position(self, matcher, candidates):
        """Test that a term is reported with its offset and length."""
        matches = matcher.find_matches("The API is ready", candidates)

        assert len(matches) == 1
        assert matches[0].term == "API"
        assert matches[0].position == 4
        assert matches[0].length == 3
        assert matches[0].definitions == ["Application Programming Interface"]

    def test_case_insensitive_preserves_source_casing(self, matcher, candidates):
        """Test that matching ignores case but reports the text as written."""
        matches = matcher.find_matches("The api and API are the same", candidates)

        assert [(m.term, m.position) for m in matches] == [("api", 4), ("API", 12)]

    def test_no_match_inside_words(self, matcher, candidates):
        """Test that a term never matches inside a longer word."""
        assert matcher.find_matches("The EROIded figures", candidates) == []
        assert matcher.find_matches("RAPID growth", candidates) == []

    def test_underscore_and_digit_are_word_characters(self, matcher, candidates):
        """Test that underscores and digits block a match like letters do."""
        assert matcher.find_matches("my_API and API2", candidates) == []

    def test_punctuation_terms_match_literally(self, matcher, candidates):
        """Test terms containing regex metacharacters."""
        matches = matcher.find_matches("We use CI/CD with C++ daily", candidates)

        found = {m.term: m.position for m in matches}
        assert found == {"CI/CD": 7, "C++": 18}

    def test_punctuation_term_bounded_by_punctuation(self, matcher, candidates):
        """Test that surrounding punctuation counts as a boundary."""
        matches = matcher.find_matches("(CI/CD), ROI.", candidates)

        assert {m.term for m in matches} == {"CI/CD", "ROI"}

    def test_overlapping_terms_are_all_reported(self, matcher, candidates):
        """Test that API inside API Gateway is reported alongside the longer term."""
        matches = matcher.find_matches("Call the API Gateway now", candidates)

        assert [(m.term, m.position) for m in matches] == [("API Gateway", 9), ("API", 9)]

    def test_longer_terms_come_first(self, matcher, candidates):
        """Test that matches are grouped by term, longest term first."""
        matches = matcher.find_matches("API then API Gateway", candidates)

        assert [m.term for m in matches] == ["API Gateway", "API", "API"]

    def test_repeated_occurrences(self, matcher, candidates):
        """Test that every occurrence of a term is reported in text order."""
        matches = matcher.find_matches("ROI, ROI and ROI", candidates)

        assert [m.position for m in matches] == [0, 5, 13]

    def test_same_term_in_two_dictionaries(self, matcher, make_candidate):
        """Test that a term defined twice yields one match per dictionary."""
        candidates = [
            make_candidate("QRS", dictionary="Tech", definitions=["Quick Response System"]),
            make_candidate("QRS", dictionary="Business", definitions=["Quarterly Revenue Summary"]),
        ]

        matches = matcher.find_matches("Check the QRS", candidates)

        assert len(matches) == 2
        assert {m.dictionary_name for m in matches} == {"Tech", "Business"}
        assert all(m.position == 10 for m in matches)

    def test_dictionary_restriction(self, matcher, candidates):
        """Test restricting matches to some dictionaries."""
        matches = matcher.find_matches("API and ROI", candidates, dictionary_ids=["business"])

        assert [m.term for m in matches] == ["ROI"]

    def test_empty_inputs(self, matcher, candidates):
        """Test that empty text or no candidates give no matches."""
        assert matcher.find_matches("", candidates) == []
        assert matcher.find_matches("The API", []) == []

    def test_blank_candidate_is_ignored(self, matcher, make_candidate):
        """Test that a whitespace-only term never matches."""
        assert matcher.find_matches("a b", [make_candidate("  ")]) == []

    def test_scan_projection(self, matcher, candidates):
        """Test that scan reports term, position, dictionary and definitions."""
        results = matcher.scan("ROI matters", candidates)

        assert len(results) == 1
        assert results[0].model_dump() == {
            "term": "ROI",
            "position": 0,
            "dictionary": "Business",
            "definitions": ["Return on Investment"],
        }

    def test_order_candidates_is_stable(self, make_candidate):
        """Test that equal-length candidates keep their input order."""
        ordered = order_candidates(
            [make_candidate("ab", term_id="1"), make_candidate("abc"), make_candidate("cd", term_id="2")]
        )

        assert [c.text for c in ordered] == ["abc", "ab", "cd"]
        assert [c.id for c in ordered[1:]] == ["1", "2"]


class TestHighlight:
    """Test cases for TermMatcher.highlight."""

    @pytest.fixture
    def matcher(self):
        return TermMatcher()

    @pytest.fixture
    def candidates(self, make_candidate):
        return [
            make_candidate("API", definitions=["Application Programming Interface"]),
            make_candidate("API Gateway", definitions=["Entry point for API calls"]),
            make_candidate("ROI", definitions=['Return on "Investment"']),
        ]

    def test_markdown(self, matcher, candidates):
        """Test markdown bold highlighting."""
        assert matcher.highlight("The API is ready", candidates) == "The **API** is ready"

    def test_markdown_keeps_source_casing(self, matcher, candidates):
        """Test that the wrapped text keeps the casing of the input."""
        result = matcher.highlight("api and Api", candidates, "markdown")

        assert result == "**api** and **Api**"

    def test_html_uses_first_definition(self, matcher, candidates):
        """Test HTML highlighting with the first definition as title."""
        result = matcher.highlight("The API", candidates, HighlightFormat.HTML)

        assert result == (
            'The <span class="dictionary-term" title="Application Programming Interface">API</span>'
        )

    def test_html_title_is_escaped(self, matcher, candidates):
        """Test that quotes in definitions cannot break the title attribute."""
        result = matcher.highlight("ROI", candidates, "html")

        assert 'title="Return on &quot;Investment&quot;"' in result

    def test_longest_match_wins_at_same_offset(self, matcher, candidates):
        """Test that only API Gateway is wrapped where API also starts."""
        result = matcher.highlight("Use the API Gateway", candidates)

        assert result == "Use the **API Gateway**"

    def test_multiple_spans_replaced_right_to_left(self, matcher, candidates):
        """Test that several highlights land at the right offsets."""
        result = matcher.highlight("API first, ROI second, API Gateway last", candidates)

        assert result == "**API** first, **ROI** second, **API Gateway** last"

    def test_overlap_with_different_start_is_dropped(self, matcher, make_candidate):
        """Test that a span starting inside a wrapped span is not wrapped again."""
        candidates = [make_candidate("big data"), make_candidate("data lake")]

        result = matcher.highlight("big data lake", candidates)

        assert result == "**big data** lake"

    def test_identity_without_matches(self, matcher, candidates):
        """Test that text without known terms comes back unchanged."""
        text = "Nothing to see here"

        assert matcher.highlight(text, candidates) == text
        assert matcher.highlight(text, [], "html") == text
        assert matcher.highlight("", candidates) == ""

    def test_unknown_format_fails(self, matcher, candidates):
        """Test that an unsupported format raises a descriptive error."""
        with pytest.raises(InvalidSearchOptionError, match="latex"):
            matcher.highlight("The API", candidates, "latex")
