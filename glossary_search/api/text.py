"""Text API endpoints: scan, highlight and LLM-assisted indexing."""

import time

from fastapi import APIRouter, Depends, HTTPException

from ..core.exceptions import GlossaryError
from ..models.glossary import IndexResult
from ..models.request import TextHighlightRequest, TextIndexRequest, TextScanRequest
from ..models.response import HighlightResponse, ScanResponse
from ..service_instance import get_service
from ..services import GlossaryService
from .errors import to_http_exception

router = APIRouter(prefix="/api/v1", tags=["text"])


@router.post(
    "/text/scan",
    response_model=ScanResponse,
    summary="Scan text",
    description="Find every known term in a text, with position, dictionary and definitions",
)
def scan_text(
    request: TextScanRequest,
    service: GlossaryService = Depends(get_service),
) -> ScanResponse:
    """
    Scan a text for known terms.

    Matching is case-insensitive on whole words. Overlapping terms from
    different entries (``API`` and ``API Gateway``) are all reported.
    """
    start_time = time.time()
    try:
        matches = service.scan_text(request.text, request.dictionaries)
        return ScanResponse(
            matches=matches,
            total_matches=len(matches),
            execution_time_ms=(time.time() - start_time) * 1000,
        )
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Scan failed: {str(e)}")


@router.post(
    "/text/highlight",
    response_model=HighlightResponse,
    summary="Highlight text",
    description="Wrap known terms in markdown bold or HTML spans carrying their first definition",
)
def highlight_text(
    request: TextHighlightRequest,
    service: GlossaryService = Depends(get_service),
) -> HighlightResponse:
    start_time = time.time()
    try:
        highlighted = service.highlight_text(request.text, request.format, request.dictionaries)
        return HighlightResponse(
            text=highlighted,
            format=request.format,
            execution_time_ms=(time.time() - start_time) * 1000,
        )
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Highlight failed: {str(e)}")


@router.post(
    "/text/index",
    response_model=IndexResult,
    summary="Index text",
    description="Report known terms in a text and add new terms suggested by Claude",
)
def index_text(
    request: TextIndexRequest,
    service: GlossaryService = Depends(get_service),
) -> IndexResult:
    """
    Index a text into a dictionary.

    Without an Anthropic API key only the scan runs and ``llm_used`` is false.
    """
    try:
        return service.index_text(request.text, request.dictionary, request.prompt)
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Indexing failed: {str(e)}")
