"""SQLite persistence for dictionaries, terms and definitions."""

from .database import Database
from .repository import GlossaryRepository

__all__ = ["Database", "GlossaryRepository"]
