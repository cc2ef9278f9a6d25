"""Typo-tolerant term suggestions for lookups that found nothing."""

from typing import List, Optional

from rapidfuzz import fuzz, process

from .normalizer import TextNormalizer


class TermSuggester:
    """Suggests known terms that are close to a misspelled query."""

    def __init__(self, threshold: float = 0.6) -> None:
        """
        Initialize the suggester.

        Args:
            threshold: Minimum similarity (0-1) for a term to be suggested
        """
        self.threshold = threshold
        self.normalizer = TextNormalizer()

    def suggest(
        self,
        query: str,
        candidates: List[str],
        max_suggestions: int = 5,
        threshold: Optional[float] = None,
    ) -> List[str]:
        """
        Suggest corrections for a query.

        Args:
            query: Query to get suggestions for
            candidates: Known term texts
            max_suggestions: Maximum number of suggestions
            threshold: Custom threshold (uses instance threshold if None)

        Returns:
            Distinct term texts, best match first
        """
        if not query or not candidates or max_suggestions <= 0:
            return []

        threshold = self.threshold if threshold is None else threshold
        unique_candidates = list(dict.fromkeys(candidates))

        suggestions = process.extract(
            self.normalizer.normalize(query),
            unique_candidates,
            scorer=fuzz.ratio,
            processor=self.normalizer.normalize,
            limit=max_suggestions,
            score_cutoff=threshold * 100,
        )

        return [suggestion[0] for suggestion in suggestions]
