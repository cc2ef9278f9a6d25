"""
Glossary Search - dictionary store with term scanning, highlighting and ranked search.

This package keeps dictionaries of terms and their definitions, finds known
terms in free-form text with whole-word boundary handling, and searches terms,
definitions and contexts with exact, prefix, contains or relevance-ranked fuzzy
matching.
"""

__version__ = "1.0.0"

from .core.matcher import TermMatcher
from .core.query_builder import QueryBuilder
from .services.glossary import GlossaryService

__all__ = [
    "GlossaryService",
    "QueryBuilder",
    "TermMatcher",
]
