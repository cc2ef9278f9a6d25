"""Data models for the glossary service."""

from .glossary import (
    CandidateTerm,
    Definition,
    Dictionary,
    ImportResult,
    IndexResult,
    ScanResult,
    Statistics,
    Term,
    TermDetails,
    TermMatch,
)
from .response import ErrorResponse, HealthResponse, MetricsResponse, SearchResponse

__all__ = [
    "CandidateTerm",
    "Definition",
    "Dictionary",
    "ErrorResponse",
    "HealthResponse",
    "ImportResult",
    "IndexResult",
    "MetricsResponse",
    "ScanResult",
    "SearchResponse",
    "Statistics",
    "Term",
    "TermDetails",
    "TermMatch",
]
