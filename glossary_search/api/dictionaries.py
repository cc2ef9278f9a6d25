"""Dictionary management API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path

from ..core.exceptions import GlossaryError
from ..models.glossary import Dictionary
from ..models.request import DictionaryCreateRequest, DictionaryUpdateRequest
from ..models.response import DeleteResponse
from ..service_instance import get_service
from ..services import GlossaryService
from .errors import to_http_exception

router = APIRouter(prefix="/api/v1", tags=["dictionaries"])


@router.post(
    "/dictionaries",
    response_model=Dictionary,
    status_code=201,
    summary="Create dictionary",
    description="Create a new, uniquely named dictionary",
)
def create_dictionary(
    request: DictionaryCreateRequest,
    service: GlossaryService = Depends(get_service),
) -> Dictionary:
    try:
        return service.create_dictionary(request.name, request.description)
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Dictionary creation failed: {str(e)}")


@router.get(
    "/dictionaries",
    response_model=List[Dictionary],
    summary="List dictionaries",
    description="List all dictionaries ordered by name",
)
def list_dictionaries(service: GlossaryService = Depends(get_service)) -> List[Dictionary]:
    try:
        return service.list_dictionaries()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Listing dictionaries failed: {str(e)}")


@router.get(
    "/dictionaries/{dictionary_ref}",
    response_model=Dictionary,
    summary="Get dictionary",
    description="Get a dictionary by id or name",
)
def get_dictionary(
    dictionary_ref: str = Path(..., description="Dictionary id or name"),
    service: GlossaryService = Depends(get_service),
) -> Dictionary:
    try:
        dictionary = service.get_dictionary(dictionary_ref)
        if dictionary is None:
            raise HTTPException(status_code=404, detail=f"Dictionary not found: {dictionary_ref}")
        return dictionary
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Dictionary lookup failed: {str(e)}")


@router.patch(
    "/dictionaries/{dictionary_id}",
    response_model=Dictionary,
    summary="Update dictionary",
    description="Change a dictionary's name and/or description",
)
def update_dictionary(
    request: DictionaryUpdateRequest,
    dictionary_id: str = Path(..., description="Dictionary id"),
    service: GlossaryService = Depends(get_service),
) -> Dictionary:
    try:
        dictionary = service.update_dictionary(dictionary_id, request.name, request.description)
        if dictionary is None:
            raise HTTPException(status_code=404, detail=f"Dictionary not found: {dictionary_id}")
        return dictionary
    except HTTPException:
        raise
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Dictionary update failed: {str(e)}")


@router.delete(
    "/dictionaries/{dictionary_id}",
    response_model=DeleteResponse,
    summary="Delete dictionary",
    description="Delete a dictionary with all of its terms and definitions",
)
def delete_dictionary(
    dictionary_id: str = Path(..., description="Dictionary id"),
    service: GlossaryService = Depends(get_service),
) -> DeleteResponse:
    try:
        if not service.delete_dictionary(dictionary_id):
            raise HTTPException(status_code=404, detail=f"Dictionary not found: {dictionary_id}")
        return DeleteResponse(id=dictionary_id, deleted=True)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Dictionary deletion failed: {str(e)}")
