"""Unit tests for typo suggestions."""

import pytest

from glossary_search.core.suggestions import TermSuggester


class TestTermSuggester:
    """Test cases for the TermSuggester class."""

    @pytest.fixture
    def suggester(self):
        return TermSuggester(threshold=0.6)

    @pytest.fixture
    def known_terms(self):
        return ["API", "API Gateway", "Kubernetes", "REST", "ROI", "Microservices"]

    def test_initialization(self, suggester):
        """Test suggester initialization."""
        assert suggester.threshold == 0.6
        assert suggester.normalizer is not None

    def test_single_typo(self, suggester, known_terms):
        """Test that a misspelled term suggests the intended one first."""
        suggestions = suggester.suggest("Kubernets", known_terms)

        assert suggestions[0] == "Kubernetes"

    def test_case_is_ignored(self, suggester, known_terms):
        """Test that suggestions compare normalized text."""
        assert suggester.suggest("microservises", known_terms)[0] == "Microservices"

    def test_unrelated_query(self, suggester, known_terms):
        """Test that nothing is suggested for an unrelated query."""
        assert suggester.suggest("zzzzzzzz", known_terms) == []

    def test_max_suggestions(self, suggester):
        """Test that the number of suggestions is capped."""
        candidates = ["data", "date", "dates", "datum", "dato"]

        assert len(suggester.suggest("dat", candidates, max_suggestions=2)) == 2

    def test_duplicates_are_suggested_once(self, suggester):
        """Test that a term present in several dictionaries appears once."""
        assert suggester.suggest("QRS", ["QRS", "QRS"]) == ["QRS"]

    def test_custom_threshold(self, suggester, known_terms):
        """Test that a stricter threshold filters weaker matches."""
        assert suggester.suggest("RST", known_terms, threshold=0.99) == []
        assert "REST" in suggester.suggest("RST", known_terms, threshold=0.5)

    def test_empty_inputs(self, suggester, known_terms):
        """Test that empty query or candidates give no suggestions."""
        assert suggester.suggest("", known_terms) == []
        assert suggester.suggest("api", []) == []
        assert suggester.suggest("api", known_terms, max_suggestions=0) == []
