"""Text normalization utilities for consistent term comparison."""

import re

_WHITESPACE_RUN = re.compile(r"\s+")


class TextNormalizer:
    """Normalizes terms and queries before they are compared or stored."""

    def normalize(self, text: str) -> str:
        """
        Normalize text for consistent comparison.

        Lowercases, trims, and collapses internal whitespace runs to a single
        space. Applying it twice gives the same result as applying it once.

        Args:
            text: Input text to normalize

        Returns:
            Normalized text
        """
        if not text:
            return ""

        return _WHITESPACE_RUN.sub(" ", text.lower().strip())


def normalize_text(text: str) -> str:
    """Module-level shortcut for ``TextNormalizer().normalize``."""
    return TextNormalizer().normalize(text)
