"""Global service instances to avoid circular imports."""

from .config import get_settings
from .services import DictionaryTransfer, GlossaryService
from .storage import Database, GlossaryRepository

# Global service instances; the database engine is created on first use
settings = get_settings()
database = Database(settings.database_url, echo=settings.database_echo)
repository = GlossaryRepository(database)
glossary_service = GlossaryService(repository, settings)
dictionary_transfer = DictionaryTransfer(repository)


def get_service() -> GlossaryService:
    """FastAPI dependency returning the global glossary service."""
    return glossary_service


def get_transfer() -> DictionaryTransfer:
    """FastAPI dependency returning the global import/export service."""
    return dictionary_transfer
