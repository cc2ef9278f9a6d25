"""Shared fixtures: an in-memory glossary store and services on top of it."""

import pytest

from glossary_search.config import Settings
from glossary_search.models.glossary import CandidateTerm
from glossary_search.services import DictionaryTransfer, GlossaryService, TermExtractor
from glossary_search.storage import Database, GlossaryRepository


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, anthropic_api_key=None, database_url="sqlite:///:memory:")


@pytest.fixture
def database():
    """Fresh in-memory database with the schema created."""
    db = Database("sqlite:///:memory:")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def repository(database):
    return GlossaryRepository(database)


@pytest.fixture
def service(repository, settings):
    """Glossary service without an LLM client."""
    return GlossaryService(repository, settings, extractor=TermExtractor(settings))


@pytest.fixture
def transfer(repository):
    return DictionaryTransfer(repository)


@pytest.fixture
def tech_glossary(service):
    """Two dictionaries mirroring a small technical and business glossary."""
    tech = service.create_dictionary("Tech", "Technical terms")
    business = service.create_dictionary("Business", "Business terms")

    service.add_term("Tech", "API", "Application Programming Interface")
    service.add_term("Tech", "API Gateway", "Entry point that routes API calls")
    service.add_term("Tech", "CI/CD", "Continuous Integration and Continuous Delivery")
    service.add_term("Tech", "REST", "Representational State Transfer")
    service.add_term("Tech", "QRS", "Quick Response System")
    service.add_term("Business", "ROI", "Return on Investment", context="accounting")
    service.add_term("Business", "KPI", "Key Performance Indicator")
    service.add_term("Business", "QRS", "Quarterly Revenue Summary")

    return {"tech": tech, "business": business}


@pytest.fixture
def make_candidate():
    """Factory for candidate terms as the store hands them to the matcher."""

    def build(text, dictionary="Tech", definitions=None, term_id=None):
        return CandidateTerm(
            id=term_id or f"{dictionary}:{text}",
            dictionary_id=dictionary.lower(),
            dictionary_name=dictionary,
            text=text,
            normalized_text=" ".join(text.lower().split()),
            definitions=definitions if definitions is not None else [f"{text} definition"],
        )

    return build
