"""Glossary service: the operations exposed by the API."""

import time
from typing import Any, Dict, List, Optional, Union

import structlog

from ..config.settings import Settings
from ..core.exceptions import DuplicateTermError, NotFoundError, TextTooLongError
from ..core.filters import MatchType, SearchOptions, coerce_options
from ..core.matcher import HighlightFormat, TermMatcher
from ..core.normalizer import TextNormalizer
from ..core.query_builder import QueryBuilder, resolve_dictionary_refs
from ..core.suggestions import TermSuggester
from ..models.glossary import (
    CandidateTerm,
    Definition,
    Dictionary,
    IndexResult,
    ScanResult,
    Statistics,
    Term,
    TermDetails,
)
from ..storage.repository import GlossaryRepository
from .term_extractor import TermExtractor, build_default_prompt

logger = structlog.get_logger()


class GlossaryService:
    """Composes storage, matching, search ranking and term extraction."""

    def __init__(
        self,
        repository: GlossaryRepository,
        settings: Settings,
        extractor: Optional[TermExtractor] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            repository: Storage access
            settings: Application settings (limits and thresholds)
            extractor: LLM term extractor; built from settings when omitted
        """
        self.repository = repository
        self.settings = settings
        self.extractor = extractor or TermExtractor(settings)
        self.matcher = TermMatcher()
        self.query_builder = QueryBuilder()
        self.suggester = TermSuggester(settings.suggestion_threshold)
        self.normalizer = TextNormalizer()

        self._stats = {
            "total_queries": 0,
            "term_lookups": 0,
            "searches": 0,
            "text_scans": 0,
            "no_matches": 0,
            "total_execution_time": 0.0,
        }

    # ==================== DICTIONARIES ====================

    def create_dictionary(self, name: str, description: Optional[str] = None) -> Dictionary:
        return self.repository.create_dictionary(name, description)

    def list_dictionaries(self) -> List[Dictionary]:
        return self.repository.list_dictionaries()

    def get_dictionary(self, dictionary_ref: str) -> Optional[Dictionary]:
        """Get a dictionary by id or name."""
        dictionary_id = self.repository.resolve_dictionary(dictionary_ref)
        return self.repository.get_dictionary(dictionary_id) if dictionary_id else None

    def update_dictionary(
        self,
        dictionary_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Dictionary]:
        return self.repository.update_dictionary(dictionary_id, name, description)

    def delete_dictionary(self, dictionary_id: str) -> bool:
        return self.repository.delete_dictionary(dictionary_id)

    # ==================== TERMS ====================

    def add_term(
        self,
        dictionary_ref: str,
        term: str,
        definition: str,
        context: Optional[str] = None,
    ) -> TermDetails:
        """
        Add a term with its first definition.

        Raises:
            NotFoundError: If the dictionary does not resolve
            DuplicateTermError: If the dictionary already holds the term
        """
        dictionary_id = self._require_dictionary(dictionary_ref)
        added = self.repository.add_term(dictionary_id, term, definition, context)
        logger.info("Term added", term=term, dictionary_id=dictionary_id)
        return added

    def get_term(self, term: str) -> List[TermDetails]:
        """Look a term up in every dictionary and count the lookup."""
        start_time = time.time()
        found = self.repository.get_terms_by_normalized(self.normalizer.normalize(term))
        if found:
            self.repository.record_lookup(t.id for t in found)

        self._track("term_lookups", start_time, bool(found))
        return found

    def search_terms(self, query: str, dictionary_ref: Optional[str] = None) -> List[TermDetails]:
        """Substring search on term text, optionally within one dictionary."""
        options = SearchOptions(
            dictionaries=[dictionary_ref] if dictionary_ref else None,
            match_type=MatchType.CONTAINS,
            limit=self.settings.max_search_limit,
        )
        return self.advanced_search(query, options)

    def advanced_search(
        self,
        query: str,
        options: Union[SearchOptions, Dict[str, Any], None] = None,
    ) -> List[TermDetails]:
        """
        Search terms by term text, definition or context.

        Fuzzy results carry a relevance score and are reordered by it within
        the returned page; other match types keep term order. Raw options
        without a limit get ``default_search_limit``.

        Raises:
            InvalidSearchOptionError: If an option value is unsupported
        """
        start_time = time.time()
        if not isinstance(options, SearchOptions):
            options = dict(options or {})
            options.setdefault("limit", self.settings.default_search_limit)
        opts = coerce_options(options)
        filter_spec = self.query_builder.build_filter(query, opts, self.repository.resolve_dictionary)
        rows = self.repository.execute_filter(filter_spec)

        if filter_spec.match_type is MatchType.FUZZY:
            ranked = self.query_builder.rank_by_relevance(rows, query, key=lambda row: row.term)
            rows = [
                row.model_copy(update={"score": self.query_builder.relevance_score(row.term, query)})
                for row in ranked
            ]

        self._track("searches", start_time, bool(rows))
        logger.debug(
            "Advanced search",
            query=query,
            match_type=filter_spec.match_type.value,
            results=len(rows),
        )
        return rows

    def update_term(self, term_id: str, term: str) -> Optional[Term]:
        return self.repository.update_term(term_id, term)

    def delete_term(self, term_id: str) -> bool:
        return self.repository.delete_term(term_id)

    def suggest_terms(self, query: str, max_suggestions: Optional[int] = None) -> List[str]:
        """Known terms that look like a misspelling of ``query``."""
        limit = self.settings.max_suggestions if max_suggestions is None else max_suggestions
        return self.suggester.suggest(query, self.repository.all_term_texts(), limit)

    # ==================== DEFINITIONS ====================

    def add_definition(
        self, term_ref: str, definition: str, context: Optional[str] = None
    ) -> Definition:
        """
        Add a definition to a term given by id or text.

        Raises:
            NotFoundError: If the term does not resolve
        """
        term_id = self.repository.resolve_term(term_ref)
        if term_id is None:
            raise NotFoundError(f"Term not found: {term_ref}")

        added = self.repository.add_definition(term_id, definition, context)
        if added is None:
            raise NotFoundError(f"Term not found: {term_ref}")
        return added

    def update_definition(
        self,
        definition_id: str,
        definition: Optional[str] = None,
        context: Optional[str] = None,
    ) -> Optional[Definition]:
        """Update a definition's text and/or context; an empty context clears it."""
        updated = self.repository.get_definition(definition_id)
        if updated is None:
            return None

        if definition is not None:
            updated = self.repository.update_definition(definition_id, definition)
        if context is not None:
            updated = self.repository.update_definition_context(definition_id, context or None)
        return updated

    def delete_definition(self, definition_id: str) -> bool:
        return self.repository.delete_definition(definition_id)

    # ==================== TEXT ====================

    def scan_text(self, text: str, dictionary_refs: Optional[List[str]] = None) -> List[ScanResult]:
        """
        Find known terms in a text.

        Unresolvable dictionary references are ignored; if none resolves the
        result is empty.

        Raises:
            TextTooLongError: If the text exceeds ``max_text_length``
        """
        start_time = time.time()
        self._check_length(text)
        if not text:
            return []

        candidates = self._load_candidates(dictionary_refs)
        if candidates is None:
            return []

        results = self.matcher.scan(text, candidates)
        self._track("text_scans", start_time, bool(results))
        return results

    def highlight_text(
        self,
        text: str,
        format: Union[HighlightFormat, str] = HighlightFormat.MARKDOWN,
        dictionary_refs: Optional[List[str]] = None,
    ) -> str:
        """
        Wrap known terms in markdown bold or HTML spans.

        Raises:
            InvalidSearchOptionError: If the format is unsupported
            TextTooLongError: If the text exceeds ``max_text_length``
        """
        start_time = time.time()
        self._check_length(text)

        candidates = self._load_candidates(dictionary_refs)
        highlighted = self.matcher.highlight(text, candidates or [], format)
        self._track("text_scans", start_time, highlighted != text)
        return highlighted

    def index_text(
        self, text: str, dictionary_ref: str, prompt: Optional[str] = None
    ) -> IndexResult:
        """
        Scan a text for known terms and add the new terms an LLM suggests.

        Suggested terms are added without definitions. Suggestions already
        present in the dictionary (after normalization) are skipped.

        Raises:
            NotFoundError: If the dictionary does not resolve
            TextTooLongError: If the text exceeds ``max_text_length``
        """
        dictionary_id = self._require_dictionary(dictionary_ref)
        existing_terms = self.scan_text(text, [dictionary_id])
        known = self.repository.normalized_terms(dictionary_id)

        terms_added: List[str] = []
        for suggestion in self.extractor.suggest_terms(prompt or build_default_prompt(text)):
            normalized = self.normalizer.normalize(suggestion)
            if not normalized or normalized in known:
                continue
            try:
                self.repository.add_term(dictionary_id, suggestion)
            except DuplicateTermError:
                logger.info("Suggested term added concurrently", term=suggestion)
                continue
            known.add(normalized)
            terms_added.append(suggestion)

        logger.info(
            "Text indexed",
            dictionary_id=dictionary_id,
            existing=len(existing_terms),
            added=len(terms_added),
        )
        return IndexResult(
            existing_terms=existing_terms,
            terms_added=terms_added,
            llm_used=self.extractor.is_configured,
        )

    # ==================== STATISTICS ====================

    def get_statistics(self, dictionary_ref: Optional[str] = None) -> Statistics:
        """
        Counts over the whole store or a single dictionary.

        Raises:
            NotFoundError: If a dictionary is given and does not resolve
        """
        dictionary_id = self._require_dictionary(dictionary_ref) if dictionary_ref else None
        return self.repository.get_statistics(dictionary_id)

    def get_stats(self) -> Dict[str, Any]:
        """Get service statistics."""
        stats = self._stats.copy()
        if stats["total_queries"] > 0:
            stats["average_execution_time_ms"] = (
                stats["total_execution_time"] / stats["total_queries"]
            )
            stats["no_match_rate"] = stats["no_matches"] / stats["total_queries"]
        else:
            stats["average_execution_time_ms"] = 0.0
            stats["no_match_rate"] = 0.0
        return stats

    # ==================== HELPERS ====================

    def _require_dictionary(self, dictionary_ref: str) -> str:
        dictionary_id = self.repository.resolve_dictionary(dictionary_ref)
        if dictionary_id is None:
            raise NotFoundError(f"Dictionary not found: {dictionary_ref}")
        return dictionary_id

    def _load_candidates(self, dictionary_refs: Optional[List[str]]) -> Optional[List[CandidateTerm]]:
        """Candidates for the given dictionaries, or ``None`` if none of them resolves."""
        dictionary_ids = None
        if dictionary_refs:
            dictionary_ids = resolve_dictionary_refs(
                dictionary_refs, self.repository.resolve_dictionary
            )
            if not dictionary_ids:
                return None
        return self.repository.load_candidates(dictionary_ids, self.settings.max_candidate_terms)

    def _check_length(self, text: str) -> None:
        if text and len(text) > self.settings.max_text_length:
            raise TextTooLongError(
                f"Text length {len(text)} exceeds maximum of {self.settings.max_text_length}"
            )

    def _track(self, counter: str, start_time: float, matched: bool) -> None:
        self._stats[counter] += 1
        self._stats["total_queries"] += 1
        self._stats["total_execution_time"] += (time.time() - start_time) * 1000
        if not matched:
            self._stats["no_matches"] += 1
