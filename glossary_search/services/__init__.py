"""Application services built on the matching core and the store."""

from .glossary import GlossaryService
from .term_extractor import TermExtractor
from .transfer import DictionaryTransfer

__all__ = ["DictionaryTransfer", "GlossaryService", "TermExtractor"]
