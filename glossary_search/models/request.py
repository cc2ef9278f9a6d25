"""Request models for API endpoints."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class DictionaryCreateRequest(BaseModel):
    """Request model for creating a dictionary."""

    name: str = Field(..., min_length=1, max_length=255, description="Unique dictionary name")
    description: Optional[str] = Field(None, description="Free-text description")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class DictionaryUpdateRequest(BaseModel):
    """Request model for updating a dictionary."""

    name: Optional[str] = Field(None, min_length=1, max_length=255, description="New name")
    description: Optional[str] = Field(None, description="New description")


class TermCreateRequest(BaseModel):
    """Request model for adding a term with its first definition."""

    dictionary: str = Field(..., min_length=1, description="Dictionary id or name")
    term: str = Field(..., min_length=1, description="Term text")
    definition: str = Field(..., min_length=1, description="Initial definition")
    context: Optional[str] = Field(None, description="Usage context of the definition")

    @field_validator("term")
    @classmethod
    def validate_term(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Term cannot be empty")
        return v


class TermUpdateRequest(BaseModel):
    """Request model for renaming a term."""

    term: str = Field(..., min_length=1, description="New term text")


class AdvancedSearchRequest(BaseModel):
    """
    Request model for advanced term search.

    ``match_type`` and ``search_in`` are passed through as given so that
    unsupported values are reported by the search itself.
    """

    query: str = Field("", description="Search query; empty matches everything for contains/fuzzy")
    dictionaries: Optional[List[str]] = Field(None, description="Dictionary ids or names")
    match_type: str = Field("contains", description="exact, prefix, fuzzy or contains")
    search_in: List[str] = Field(
        default_factory=lambda: ["term"], description="Any of term, definition, context"
    )
    limit: Optional[int] = Field(
        None, ge=0, description="Maximum number of results; defaults to the configured search limit"
    )
    offset: int = Field(0, ge=0, description="Number of results to skip")


class DefinitionCreateRequest(BaseModel):
    """Request model for adding a definition to an existing term."""

    term: str = Field(..., min_length=1, description="Term id or term text")
    definition: str = Field(..., min_length=1, description="Definition text")
    context: Optional[str] = Field(None, description="Usage context")


class DefinitionUpdateRequest(BaseModel):
    """Request model for updating a definition. An empty context clears it."""

    definition: Optional[str] = Field(None, min_length=1, description="New definition text")
    context: Optional[str] = Field(None, description="New usage context")


class TextScanRequest(BaseModel):
    """Request model for scanning text for known terms."""

    text: str = Field(..., description="Text to scan")
    dictionaries: Optional[List[str]] = Field(None, description="Dictionary ids or names")


class TextHighlightRequest(BaseModel):
    """Request model for highlighting known terms in text."""

    text: str = Field(..., description="Text to highlight")
    format: str = Field("markdown", description="markdown or html")
    dictionaries: Optional[List[str]] = Field(None, description="Dictionary ids or names")


class TextIndexRequest(BaseModel):
    """Request model for LLM-assisted indexing of a text."""

    text: str = Field(..., min_length=1, description="Text to index")
    dictionary: str = Field(..., min_length=1, description="Target dictionary id or name")
    prompt: Optional[str] = Field(None, description="Custom prompt for the LLM")


class ImportRequest(BaseModel):
    """Request model for importing dictionary data."""

    format: Literal["json", "csv"] = Field("json", description="Format of data")
    data: str = Field(..., min_length=1, description="Serialized dictionary data")
