"""Locate known glossary terms inside free-form text."""

import html
import re
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..models.glossary import CandidateTerm, ScanResult, TermMatch
from .exceptions import InvalidSearchOptionError


class HighlightFormat(str, Enum):
    """Output formats supported by ``TermMatcher.highlight``."""

    MARKDOWN = "markdown"
    HTML = "html"


def order_candidates(candidates: Iterable[CandidateTerm]) -> List[CandidateTerm]:
    """Sort candidates by descending term length, keeping input order for ties."""
    return sorted(candidates, key=lambda candidate: len(candidate.text), reverse=True)


class TermMatcher:
    """Finds whole-word occurrences of known terms and renders highlights.

    The matcher holds no state between calls; every call builds its own
    patterns from the candidate list it is given.
    """

    def find_matches(
        self,
        text: str,
        candidates: Sequence[CandidateTerm],
        dictionary_ids: Optional[Iterable[str]] = None,
    ) -> List[TermMatch]:
        """
        Find every occurrence of every candidate term in ``text``.

        Matching is case-insensitive and bounded by non-word characters on
        both sides. Occurrences of the same term never overlap each other,
        while occurrences of different terms may (``API`` inside
        ``API Gateway``); both are reported.

        Args:
            text: Text to scan
            candidates: Known terms to look for
            dictionary_ids: Optional restriction to terms of these dictionaries

        Returns:
            Matches grouped by term (longest term first), in text order per term
        """
        if not text or not candidates:
            return []

        allowed = set(dictionary_ids) if dictionary_ids else None
        matches: List[TermMatch] = []

        for candidate in order_candidates(candidates):
            if allowed is not None and candidate.dictionary_id not in allowed:
                continue
            if not candidate.text.strip():
                continue

            for found in self._term_pattern(candidate.text).finditer(text):
                matches.append(
                    TermMatch(
                        term=found.group(0),
                        term_id=candidate.id,
                        position=found.start(),
                        length=found.end() - found.start(),
                        dictionary_id=candidate.dictionary_id,
                        dictionary_name=candidate.dictionary_name,
                        definitions=list(candidate.definitions),
                    )
                )

        return matches

    def scan(
        self,
        text: str,
        candidates: Sequence[CandidateTerm],
        dictionary_ids: Optional[Iterable[str]] = None,
    ) -> List[ScanResult]:
        """Project ``find_matches`` onto term, position, dictionary and definitions."""
        return [
            ScanResult(
                term=match.term,
                position=match.position,
                dictionary=match.dictionary_name,
                definitions=match.definitions,
            )
            for match in self.find_matches(text, candidates, dictionary_ids)
        ]

    def highlight(
        self,
        text: str,
        candidates: Sequence[CandidateTerm],
        format: Union[HighlightFormat, str] = HighlightFormat.MARKDOWN,
    ) -> str:
        """
        Wrap every known term in ``text`` with markdown bold or an HTML span.

        Where several matches start at the same offset only the longest is
        wrapped. Replacements run right to left so earlier offsets stay valid.
        Text without any known term is returned unchanged.

        Args:
            text: Text to highlight
            candidates: Known terms to look for
            format: ``markdown`` or ``html``

        Returns:
            Highlighted text
        """
        highlight_format = self._resolve_format(format)

        matches = self.find_matches(text, candidates)
        if not matches:
            return text

        result = text
        for match in sorted(self._select_spans(matches), key=lambda m: m.position, reverse=True):
            original = result[match.position:match.end]
            wrapped = self._wrap(original, match, highlight_format)
            result = result[:match.position] + wrapped + result[match.end:]

        return result

    @staticmethod
    def _term_pattern(term: str) -> "re.Pattern[str]":
        return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE)

    @staticmethod
    def _select_spans(matches: List[TermMatch]) -> List[TermMatch]:
        """Keep the longest match per start offset, then drop spans that overlap a kept one."""
        longest_at: Dict[int, TermMatch] = {}
        for match in matches:
            existing = longest_at.get(match.position)
            if existing is None or match.length > existing.length:
                longest_at[match.position] = match

        selected: List[TermMatch] = []
        covered_until = 0
        for match in sorted(longest_at.values(), key=lambda m: m.position):
            if selected and match.position < covered_until:
                continue
            selected.append(match)
            covered_until = match.end

        return selected

    @staticmethod
    def _wrap(original: str, match: TermMatch, highlight_format: HighlightFormat) -> str:
        if highlight_format is HighlightFormat.HTML:
            title = html.escape(match.definitions[0] if match.definitions else "", quote=True)
            return f'<span class="dictionary-term" title="{title}">{original}</span>'
        return f"**{original}**"

    @staticmethod
    def _resolve_format(format: Union[HighlightFormat, str]) -> HighlightFormat:
        try:
            return HighlightFormat(format)
        except ValueError:
            supported = ", ".join(f.value for f in HighlightFormat)
            raise InvalidSearchOptionError(
                f"Unsupported highlight format: {format!r}. Expected one of: {supported}"
            ) from None
