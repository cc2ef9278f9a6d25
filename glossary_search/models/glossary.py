"""Domain records exchanged between storage, the matching core and the API."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Dictionary(BaseModel):
    """A named collection of terms."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    created_at: int = Field(..., description="Creation time, epoch milliseconds")
    updated_at: int = Field(..., description="Last update time, epoch milliseconds")


class Definition(BaseModel):
    """One definition of a term, optionally scoped to a usage context."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    term_id: str
    definition: str
    context: Optional[str] = None
    created_at: int


class Term(BaseModel):
    """A glossary entry belonging to exactly one dictionary."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    dictionary_id: str
    term: str
    normalized_term: str
    created_at: int
    updated_at: int


class TermDetails(Term):
    """A term joined with its dictionary and ordered definitions."""

    dictionary: Dictionary
    definitions: List[Definition] = Field(default_factory=list)
    score: Optional[int] = Field(None, ge=0, le=100, description="Fuzzy relevance score")


class CandidateTerm(BaseModel):
    """A known term as handed to the matcher by the storage layer."""

    model_config = ConfigDict(frozen=True)

    id: str
    dictionary_id: str
    dictionary_name: str
    text: str
    normalized_text: str
    definitions: List[str] = Field(default_factory=list)


class TermMatch(BaseModel):
    """One located occurrence of a term inside scanned text."""

    term: str = Field(..., description="Matched text with the source casing preserved")
    term_id: str
    position: int = Field(..., ge=0)
    length: int = Field(..., ge=0)
    dictionary_id: str
    dictionary_name: str
    definitions: List[str] = Field(default_factory=list)

    @property
    def end(self) -> int:
        return self.position + self.length


class ScanResult(BaseModel):
    """Caller-facing projection of a term match."""

    term: str
    position: int
    dictionary: str
    definitions: List[str]


class IndexResult(BaseModel):
    """Outcome of LLM-assisted indexing of a text into a dictionary."""

    existing_terms: List[ScanResult]
    terms_added: List[str]
    llm_used: bool


class DictionaryTermCount(BaseModel):
    dictionary_id: str
    name: str
    term_count: int


class TermUsage(BaseModel):
    term_id: str
    term: str
    dictionary: str
    lookup_count: int
    last_accessed: Optional[int] = None


class Statistics(BaseModel):
    """Aggregate counts over the glossary store."""

    total_dictionaries: int
    total_terms: int
    total_definitions: int
    dictionaries: List[DictionaryTermCount]
    most_looked_up: List[TermUsage]


class ImportResult(BaseModel):
    """Outcome of a JSON or CSV import."""

    dictionaries: List[Dictionary]
    term_count: int
    definition_count: int
