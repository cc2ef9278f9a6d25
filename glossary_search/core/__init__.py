"""Core term-matching and search-ranking functionality."""

from .filters import FilterSpec, MatchType, SearchField, SearchOptions
from .matcher import HighlightFormat, TermMatcher
from .normalizer import TextNormalizer, normalize_text
from .query_builder import QueryBuilder, resolve_dictionary_refs
from .suggestions import TermSuggester

__all__ = [
    "FilterSpec",
    "HighlightFormat",
    "MatchType",
    "QueryBuilder",
    "SearchField",
    "SearchOptions",
    "TermMatcher",
    "TermSuggester",
    "TextNormalizer",
    "normalize_text",
    "resolve_dictionary_refs",
]
