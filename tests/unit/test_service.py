"""Unit tests for the glossary service."""

from unittest.mock import MagicMock

import pytest

from glossary_search.core.exceptions import (
    DuplicateTermError,
    InvalidSearchOptionError,
    NotFoundError,
    TextTooLongError,
)
from glossary_search.services import GlossaryService


class TestDictionaryAndTermOperations:
    """Test cases for dictionary and term operations."""

    def test_add_term_by_dictionary_name(self, service):
        """Test that a dictionary can be referenced by name."""
        tech = service.create_dictionary("Tech")

        added = service.add_term("Tech", "API", "Application Programming Interface")

        assert added.dictionary_id == tech.id
        assert added.definitions[0].definition == "Application Programming Interface"

    def test_add_term_unknown_dictionary(self, service):
        """Test that adding to an unknown dictionary fails."""
        with pytest.raises(NotFoundError, match="Nope"):
            service.add_term("Nope", "API", "x")

    def test_add_duplicate_term(self, service):
        """Test that a duplicate term is rejected."""
        service.create_dictionary("Tech")
        service.add_term("Tech", "API", "x")

        with pytest.raises(DuplicateTermError):
            service.add_term("Tech", "api", "y")

    def test_get_dictionary_by_name_or_id(self, service):
        """Test dictionary lookup by either reference."""
        tech = service.create_dictionary("Tech")

        assert service.get_dictionary("Tech") == tech
        assert service.get_dictionary(tech.id) == tech
        assert service.get_dictionary("Nope") is None

    def test_get_term_across_dictionaries(self, service, tech_glossary):
        """Test that a term is found in every dictionary that has it."""
        found = service.get_term("qrs")

        assert {t.dictionary.name for t in found} == {"Tech", "Business"}
        assert {t.definitions[0].definition for t in found} == {
            "Quick Response System",
            "Quarterly Revenue Summary",
        }

    def test_get_term_records_lookups(self, service, tech_glossary):
        """Test that successful lookups are counted."""
        service.get_term("API")
        service.get_term(" api ")
        service.get_term("unknown")

        usage = service.get_statistics().most_looked_up

        assert usage[0].term == "API"
        assert usage[0].lookup_count == 2

    def test_search_terms(self, service, tech_glossary):
        """Test substring search with and without a dictionary."""
        assert [t.term for t in service.search_terms("ap")] == ["API", "API Gateway"]
        assert [t.term for t in service.search_terms("qrs", "Business")] == ["QRS"]
        assert service.search_terms("api", "Nope") == []

    def test_update_and_delete_term(self, service, tech_glossary):
        """Test renaming and deleting a term."""
        (rest,) = service.get_term("REST")

        assert service.update_term(rest.id, "RESTful").normalized_term == "restful"
        assert service.delete_term(rest.id)
        assert service.get_term("RESTful") == []
        assert service.update_term(rest.id, "x") is None

    def test_suggest_terms(self, service, tech_glossary):
        """Test typo suggestions from the stored terms."""
        assert "API Gateway" in service.suggest_terms("API Gatway")
        assert service.suggest_terms("API Gatway", max_suggestions=1) == ["API Gateway"]


class TestAdvancedSearch:
    """Test cases for advanced search."""

    def test_prefix(self, service, tech_glossary):
        """Test prefix search."""
        results = service.advanced_search("ci", {"match_type": "prefix"})

        assert [r.term for r in results] == ["CI/CD"]

    def test_definition_search(self, service, tech_glossary):
        """Test searching definitions only."""
        results = service.advanced_search("investment", {"search_in": ["definition"]})

        assert [r.term for r in results] == ["ROI"]

    def test_context_search(self, service, tech_glossary):
        """Test searching contexts only."""
        results = service.advanced_search("accounting", {"search_in": ["context"]})

        assert [r.term for r in results] == ["ROI"]

    def test_mixed_dictionaries(self, service, tech_glossary):
        """Test that unknown dictionary refs are ignored alongside known ones."""
        results = service.advanced_search("qrs", {"dictionaries": ["Tech", "Nope"]})

        assert [(r.term, r.dictionary.name) for r in results] == [("QRS", "Tech")]

    def test_only_unknown_dictionaries(self, service, tech_glossary):
        """Test that only unknown dictionaries give an empty result."""
        assert service.advanced_search("api", {"dictionaries": ["Nope"]}) == []

    def test_fuzzy_is_ranked_by_relevance(self, service, tech_glossary):
        """Test that fuzzy results are reordered by score with stable ties."""
        results = service.advanced_search("api", {"match_type": "fuzzy"})

        assert [(r.term, r.score) for r in results] == [("API", 100), ("API Gateway", 90)]

    def test_fuzzy_subsequence_scores(self, service, tech_glossary):
        """Test that a subsequence-only hit scores 60."""
        results = service.advanced_search("ai", {"match_type": "fuzzy"})

        assert ("API", 60) in [(r.term, r.score) for r in results]

    def test_non_fuzzy_results_have_no_score(self, service, tech_glossary):
        """Test that only fuzzy results are scored."""
        results = service.advanced_search("api")

        assert all(r.score is None for r in results)

    def test_pagination(self, service, tech_glossary):
        """Test that pages concatenate to the full ordered result."""
        full = [r.term for r in service.advanced_search("", {"limit": 100})]
        paged = []
        for offset in range(0, len(full), 3):
            paged.extend(r.term for r in service.advanced_search("", {"limit": 3, "offset": offset}))

        assert len(full) == 8
        assert paged == full

    def test_default_limit_comes_from_settings(self, repository, settings, tech_glossary):
        """Test that searches without a limit use the configured default."""
        limited = GlossaryService(repository, settings.model_copy(update={"default_search_limit": 2}))

        assert [r.term for r in limited.advanced_search("")] == ["API", "API Gateway"]
        assert [r.term for r in limited.advanced_search("", {"match_type": "contains"})] == [
            "API",
            "API Gateway",
        ]
        assert len(limited.advanced_search("", {"limit": 5})) == 5
        assert len(limited.search_terms("")) == 8

    def test_invalid_option(self, service, tech_glossary):
        """Test that an unsupported search field is rejected."""
        with pytest.raises(InvalidSearchOptionError):
            service.advanced_search("api", {"search_in": ["notes"]})


class TestDefinitionOperations:
    """Test cases for definition operations."""

    def test_add_by_term_text(self, service, tech_glossary):
        """Test adding a definition to a term referenced by text."""
        added = service.add_definition("rest", "REST architectural style", "web")
        (rest,) = service.get_term("REST")

        assert added.context == "web"
        assert [d.definition for d in rest.definitions] == [
            "Representational State Transfer",
            "REST architectural style",
        ]

    def test_add_to_unknown_term(self, service, tech_glossary):
        """Test that adding to an unknown term fails."""
        with pytest.raises(NotFoundError):
            service.add_definition("nothing", "x")

    def test_update_text_and_context(self, service, tech_glossary):
        """Test updating a definition's text and clearing its context."""
        (roi,) = service.get_term("ROI")
        definition_id = roi.definitions[0].id

        updated = service.update_definition(definition_id, definition="Return on invested capital")
        assert updated.definition == "Return on invested capital"
        assert updated.context == "accounting"

        cleared = service.update_definition(definition_id, context="")
        assert cleared.context is None

        assert service.update_definition("missing", definition="x") is None

    def test_delete(self, service, tech_glossary):
        """Test deleting a definition."""
        (kpi,) = service.get_term("KPI")

        assert service.delete_definition(kpi.definitions[0].id)
        assert not service.delete_definition(kpi.definitions[0].id)


class TestTextOperations:
    """Test cases for scanning, highlighting and indexing."""

    def test_scan(self, service, tech_glossary):
        """Test scanning text against every dictionary."""
        results = service.scan_text("The API Gateway speeds up CI/CD")

        assert [(r.term, r.position) for r in results] == [
            ("API Gateway", 4),
            ("CI/CD", 26),
            ("API", 4),
        ]

    def test_scan_same_term_two_dictionaries(self, service, tech_glossary):
        """Test that a term in two dictionaries is reported for each."""
        results = service.scan_text("QRS report")

        assert sorted(r.dictionary for r in results) == ["Business", "Tech"]

    def test_scan_restricted(self, service, tech_glossary):
        """Test scanning with dictionary restrictions."""
        assert [r.dictionary for r in service.scan_text("QRS", ["Business", "Nope"])] == ["Business"]
        assert service.scan_text("QRS", ["Nope"]) == []

    def test_scan_empty_text(self, service, tech_glossary):
        """Test that empty text gives no matches."""
        assert service.scan_text("") == []

    def test_text_too_long(self, repository, settings):
        """Test the text length cap."""
        capped = GlossaryService(repository, settings.model_copy(update={"max_text_length": 5}))

        with pytest.raises(TextTooLongError):
            capped.scan_text("123456")
        with pytest.raises(TextTooLongError):
            capped.highlight_text("123456")

    def test_highlight(self, service, tech_glossary):
        """Test markdown and HTML highlighting."""
        assert service.highlight_text("Use the API Gateway") == "Use the **API Gateway**"
        assert service.highlight_text("ROI", "html") == (
            '<span class="dictionary-term" title="Return on Investment">ROI</span>'
        )

    def test_highlight_without_matches(self, service, tech_glossary):
        """Test that highlighting is the identity without known terms."""
        assert service.highlight_text("plain words only") == "plain words only"

    def test_highlight_bad_format(self, service, tech_glossary):
        """Test that an unknown format is rejected."""
        with pytest.raises(InvalidSearchOptionError):
            service.highlight_text("API", "rtf")

    def test_index_without_llm(self, service, tech_glossary):
        """Test indexing when no Anthropic key is configured."""
        result = service.index_text("The API is ready", "Tech")

        assert [t.term for t in result.existing_terms] == ["API"]
        assert result.terms_added == []
        assert result.llm_used is False

    def test_index_adds_new_suggestions(self, repository, settings, tech_glossary):
        """Test that only new, distinct suggestions are added."""
        extractor = MagicMock()
        extractor.is_configured = True
        extractor.suggest_terms.return_value = ["api", "Kubernetes", "kubernetes ", "Helm", "  "]
        indexing = GlossaryService(repository, settings, extractor=extractor)

        result = indexing.index_text("Deploy the API with Kubernetes and Helm", "Tech")

        assert result.llm_used is True
        assert result.terms_added == ["Kubernetes", "Helm"]
        assert [t.term for t in result.existing_terms] == ["API"]
        (kubernetes,) = indexing.get_term("kubernetes")
        assert kubernetes.definitions == []

    def test_index_uses_custom_prompt(self, repository, settings, tech_glossary):
        """Test that a caller prompt replaces the default one."""
        extractor = MagicMock()
        extractor.is_configured = True
        extractor.suggest_terms.return_value = []
        indexing = GlossaryService(repository, settings, extractor=extractor)

        indexing.index_text("text", "Tech", prompt="List terms")

        extractor.suggest_terms.assert_called_once_with("List terms")

    def test_index_unknown_dictionary(self, service):
        """Test indexing into an unknown dictionary."""
        with pytest.raises(NotFoundError):
            service.index_text("text", "Nope")


class TestStatistics:
    """Test cases for statistics and service metrics."""

    def test_statistics(self, service, tech_glossary):
        """Test store-wide statistics."""
        stats = service.get_statistics()

        assert stats.total_dictionaries == 2
        assert stats.total_terms == 8
        assert stats.total_definitions == 8

    def test_statistics_by_dictionary_name(self, service, tech_glossary):
        """Test statistics for a single dictionary."""
        stats = service.get_statistics("Business")

        assert stats.total_terms == 3
        assert [d.name for d in stats.dictionaries] == ["Business"]

    def test_statistics_unknown_dictionary(self, service):
        """Test statistics for an unknown dictionary."""
        with pytest.raises(NotFoundError):
            service.get_statistics("Nope")

    def test_service_stats(self, service, tech_glossary):
        """Test the counters behind the metrics endpoint."""
        service.get_term("API")
        service.get_term("missing")
        service.advanced_search("api")
        service.scan_text("API")

        stats = service.get_stats()

        assert stats["total_queries"] == 4
        assert stats["term_lookups"] == 2
        assert stats["searches"] == 1
        assert stats["text_scans"] == 1
        assert stats["no_match_rate"] == 0.25
        assert stats["average_execution_time_ms"] >= 0.0
