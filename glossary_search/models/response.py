"""Response models for API endpoints."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .glossary import ScanResult, TermDetails


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TermLookupResponse(BaseModel):
    """Response for exact term lookups."""

    query: str = Field(..., description="Term that was looked up")
    found: bool = Field(..., description="Whether any dictionary defines the term")
    terms: List[TermDetails] = Field(..., description="Matching terms, one per dictionary")
    suggestions: Optional[List[str]] = Field(None, description="Similar known terms if no match")
    execution_time_ms: float = Field(..., description="Lookup execution time in milliseconds")
    timestamp: datetime = Field(default_factory=utcnow, description="Response timestamp")


class SearchResponse(BaseModel):
    """Response for term searches."""

    query: str = Field(..., description="Original search query")
    match_type: str = Field(..., description="Matching mode used")
    total_results: int = Field(..., description="Number of results in this page")
    results: List[TermDetails] = Field(..., description="Search results")
    execution_time_ms: float = Field(..., description="Query execution time in milliseconds")
    timestamp: datetime = Field(default_factory=utcnow, description="Response timestamp")


class SuggestionResponse(BaseModel):
    """Response for typo suggestions."""

    query: str
    suggestions: List[str]


class ScanResponse(BaseModel):
    """Response for text scans."""

    matches: List[ScanResult] = Field(..., description="Known terms found in the text")
    total_matches: int = Field(..., description="Number of matches")
    execution_time_ms: float = Field(..., description="Scan execution time in milliseconds")


class HighlightResponse(BaseModel):
    """Response for text highlighting."""

    text: str = Field(..., description="Highlighted text")
    format: str = Field(..., description="Output format used")
    execution_time_ms: float = Field(..., description="Execution time in milliseconds")


class DeleteResponse(BaseModel):
    id: str
    deleted: bool


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=utcnow, description="Error timestamp")
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
    uptime: float = Field(..., description="Service uptime in seconds")
    timestamp: datetime = Field(default_factory=utcnow, description="Check timestamp")
    dependencies: Dict[str, str] = Field(..., description="Dependency status")


class MetricsResponse(BaseModel):
    """Performance metrics response."""

    total_queries: int = Field(..., description="Lookups, searches and scans processed")
    term_lookups: int = Field(..., description="Exact term lookups")
    searches: int = Field(..., description="Term searches")
    text_scans: int = Field(..., description="Text scans and highlights")
    average_response_time_ms: float = Field(..., description="Average response time")
    no_match_rate: float = Field(..., description="Share of queries without results")
    memory_usage_mb: float = Field(..., description="Memory usage in MB")
    timestamp: datetime = Field(default_factory=utcnow, description="Metrics timestamp")
