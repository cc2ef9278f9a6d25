"""Search filter construction and fuzzy relevance ranking."""

from typing import Callable, Iterable, List, Optional, TypeVar, Union

from .filters import (
    AllOf,
    AnyOf,
    DictionaryIn,
    FieldPredicate,
    FilterSpec,
    MatchNothing,
    Pagination,
    SearchOptions,
    coerce_options,
)
from .normalizer import TextNormalizer

T = TypeVar("T")

DictionaryResolver = Callable[[str], Optional[str]]


def resolve_dictionary_refs(
    refs: Iterable[str],
    resolver: Optional[DictionaryResolver] = None,
) -> List[str]:
    """
    Resolve dictionary ids or names to ids, dropping the ones that do not resolve.

    Args:
        refs: Dictionary ids or display names
        resolver: Maps a reference to an id or ``None``; references are
            taken as ids when no resolver is given

    Returns:
        Resolved ids in input order, without duplicates
    """
    resolved: List[str] = []
    for ref in refs:
        dictionary_id = resolver(ref) if resolver else ref
        if dictionary_id and dictionary_id not in resolved:
            resolved.append(dictionary_id)
    return resolved


class QueryBuilder:
    """Builds ``FilterSpec`` trees from free-text queries and ranks fuzzy hits."""

    def __init__(self) -> None:
        self.normalizer = TextNormalizer()

    def build_filter(
        self,
        query: str,
        options: Union[SearchOptions, dict, None] = None,
        resolve_dictionary: Optional[DictionaryResolver] = None,
    ) -> FilterSpec:
        """
        Build the filter for an advanced search.

        Each requested field gets one predicate for the chosen match type; the
        field predicates are OR-ed and the result is AND-ed with a dictionary
        restriction when dictionaries are given. If dictionaries were given
        but none of them resolves, the filter matches nothing.

        Args:
            query: Free-text query (normalized here)
            options: Search options or their raw values
            resolve_dictionary: Maps a dictionary id or name to an id

        Returns:
            FilterSpec ordered by term text and paginated

        Raises:
            InvalidSearchOptionError: If an option value is unsupported
        """
        opts = coerce_options(options)
        normalized_query = self.normalizer.normalize(query or "")

        base = dict(
            query=normalized_query,
            match_type=opts.match_type,
            search_fields=opts.search_in,
            pagination=Pagination(limit=opts.limit, offset=opts.offset),
        )

        dictionary_ids: List[str] = []
        if opts.dictionaries:
            dictionary_ids = resolve_dictionary_refs(opts.dictionaries, resolve_dictionary)
            if not dictionary_ids:
                return FilterSpec(where=MatchNothing(), **base)

        conditions = []
        field_predicates = [
            FieldPredicate(field=field, match_type=opts.match_type, value=normalized_query)
            for field in opts.search_in
        ]
        if field_predicates:
            conditions.append(AnyOf(predicates=field_predicates))
        if dictionary_ids:
            conditions.append(DictionaryIn(dictionary_ids=dictionary_ids))

        if not conditions:
            where = None
        elif len(conditions) == 1:
            where = conditions[0]
        else:
            where = AllOf(predicates=conditions)

        return FilterSpec(where=where, **base)

    def relevance_score(self, term: str, query: str) -> int:
        """
        Score how well ``term`` answers ``query`` on a 0-100 scale.

        Equal → 100, prefix → 90, substring → 70. Otherwise the query
        characters are aligned greedily, left to right, against the term and
        the score is ``floor(60 * aligned / len(query))``.
        """
        normalized_term = self.normalizer.normalize(term)
        normalized_query = self.normalizer.normalize(query)

        if normalized_term == normalized_query:
            return 100
        if normalized_term.startswith(normalized_query):
            return 90
        if normalized_query in normalized_term:
            return 70

        aligned = 0
        for char in normalized_term:
            if aligned < len(normalized_query) and char == normalized_query[aligned]:
                aligned += 1

        return (60 * aligned) // len(normalized_query)

    def rank_by_relevance(
        self,
        rows: Iterable[T],
        query: str,
        key: Callable[[T], str],
    ) -> List[T]:
        """Order rows by descending relevance; equal scores keep their input order."""
        return sorted(rows, key=lambda row: -self.relevance_score(key(row), query))
