"""API endpoints for the glossary service."""

from .definitions import router as definitions_router
from .dictionaries import router as dictionaries_router
from .health import router as health_router
from .metrics import router as metrics_router
from .statistics import router as statistics_router
from .terms import router as terms_router
from .text import router as text_router
from .transfer import router as transfer_router

__all__ = [
    "definitions_router",
    "dictionaries_router",
    "health_router",
    "metrics_router",
    "statistics_router",
    "terms_router",
    "text_router",
    "transfer_router",
]
