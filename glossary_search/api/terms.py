"""Term API endpoints: add, lookup, search, update, delete and suggestions."""

import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from ..config import get_settings
from ..core.exceptions import GlossaryError
from ..models.glossary import Term, TermDetails
from ..models.request import AdvancedSearchRequest, TermCreateRequest, TermUpdateRequest
from ..models.response import DeleteResponse, SearchResponse, SuggestionResponse, TermLookupResponse
from ..service_instance import get_service
from ..services import GlossaryService
from .errors import to_http_exception

router = APIRouter(prefix="/api/v1", tags=["terms"])
settings = get_settings()


@router.post(
    "/terms",
    response_model=TermDetails,
    status_code=201,
    summary="Add term",
    description="Add a term with its first definition to a dictionary",
)
def add_term(
    request: TermCreateRequest,
    service: GlossaryService = Depends(get_service),
) -> TermDetails:
    try:
        return service.add_term(request.dictionary, request.term, request.definition, request.context)
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Adding term failed: {str(e)}")


@router.get(
    "/terms/lookup/{term:path}",
    response_model=TermLookupResponse,
    summary="Look up term",
    description="Get a term from every dictionary that defines it, with suggestions if none does",
)
def lookup_term(
    term: str = Path(..., min_length=1, description="Term text, may contain slashes (CI/CD)"),
    include_suggestions: bool = Query(True, description="Suggest similar terms when nothing matches"),
    service: GlossaryService = Depends(get_service),
) -> TermLookupResponse:
    """
    Look up a term by its normalized text.

    Every successful lookup is counted in the usage statistics.
    """
    start_time = time.time()
    try:
        found = service.get_term(term)
        suggestions = None
        if not found and include_suggestions:
            suggestions = service.suggest_terms(term)

        return TermLookupResponse(
            query=term,
            found=bool(found),
            terms=found,
            suggestions=suggestions,
            execution_time_ms=(time.time() - start_time) * 1000,
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Term lookup failed: {str(e)}")


@router.get(
    "/terms/search",
    response_model=SearchResponse,
    summary="Search terms",
    description="Substring search on term text, optionally within one dictionary",
)
def search_terms(
    query: str = Query("", description="Text contained in the term"),
    dictionary: Optional[str] = Query(None, description="Dictionary id or name"),
    service: GlossaryService = Depends(get_service),
) -> SearchResponse:
    start_time = time.time()
    try:
        results = service.search_terms(query, dictionary)
        return SearchResponse(
            query=query,
            match_type="contains",
            total_results=len(results),
            results=results,
            execution_time_ms=(time.time() - start_time) * 1000,
        )
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}")


@router.post(
    "/terms/search",
    response_model=SearchResponse,
    summary="Advanced search",
    description="Search term, definition and context fields with exact, prefix, contains or fuzzy matching",
)
def advanced_search(
    request: AdvancedSearchRequest,
    service: GlossaryService = Depends(get_service),
) -> SearchResponse:
    """
    Search with explicit match type, fields, dictionaries and pagination.

    Fuzzy results carry a 0-100 relevance score and are ordered by it.
    """
    start_time = time.time()
    try:
        if request.limit is not None and request.limit > settings.max_search_limit:
            raise HTTPException(
                status_code=400,
                detail=f"Limit too large. Maximum is {settings.max_search_limit}",
            )

        options = request.model_dump(exclude={"query"}, exclude_none=True)
        results = service.advanced_search(request.query, options)
        return SearchResponse(
            query=request.query,
            match_type=request.match_type,
            total_results=len(results),
            results=results,
            execution_time_ms=(time.time() - start_time) * 1000,
        )
    except HTTPException:
        raise
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}")


@router.get(
    "/terms/suggestions/{query:path}",
    response_model=SuggestionResponse,
    summary="Term suggestions",
    description="Known terms similar to a possibly misspelled query",
)
def suggest_terms(
    query: str = Path(..., min_length=1, description="Possibly misspelled term"),
    max_suggestions: Optional[int] = Query(None, ge=1, le=50, description="Maximum suggestions"),
    service: GlossaryService = Depends(get_service),
) -> SuggestionResponse:
    try:
        return SuggestionResponse(query=query, suggestions=service.suggest_terms(query, max_suggestions))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Suggestions failed: {str(e)}")


@router.patch(
    "/terms/{term_id}",
    response_model=Term,
    summary="Update term",
    description="Rename a term; its normalized form is recomputed",
)
def update_term(
    request: TermUpdateRequest,
    term_id: str = Path(..., description="Term id"),
    service: GlossaryService = Depends(get_service),
) -> Term:
    try:
        term = service.update_term(term_id, request.term)
        if term is None:
            raise HTTPException(status_code=404, detail=f"Term not found: {term_id}")
        return term
    except HTTPException:
        raise
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Term update failed: {str(e)}")


@router.delete(
    "/terms/{term_id}",
    response_model=DeleteResponse,
    summary="Delete term",
    description="Delete a term and its definitions",
)
def delete_term(
    term_id: str = Path(..., description="Term id"),
    service: GlossaryService = Depends(get_service),
) -> DeleteResponse:
    try:
        if not service.delete_term(term_id):
            raise HTTPException(status_code=404, detail=f"Term not found: {term_id}")
        return DeleteResponse(id=term_id, deleted=True)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Term deletion failed: {str(e)}")
