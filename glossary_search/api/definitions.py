"""Definition API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Path

from ..core.exceptions import GlossaryError
from ..models.glossary import Definition
from ..models.request import DefinitionCreateRequest, DefinitionUpdateRequest
from ..models.response import DeleteResponse
from ..service_instance import get_service
from ..services import GlossaryService
from .errors import to_http_exception

router = APIRouter(prefix="/api/v1", tags=["definitions"])


@router.post(
    "/definitions",
    response_model=Definition,
    status_code=201,
    summary="Add definition",
    description="Add a definition to a term given by id or text",
)
def add_definition(
    request: DefinitionCreateRequest,
    service: GlossaryService = Depends(get_service),
) -> Definition:
    try:
        return service.add_definition(request.term, request.definition, request.context)
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Adding definition failed: {str(e)}")


@router.patch(
    "/definitions/{definition_id}",
    response_model=Definition,
    summary="Update definition",
    description="Change a definition's text and/or context",
)
def update_definition(
    request: DefinitionUpdateRequest,
    definition_id: str = Path(..., description="Definition id"),
    service: GlossaryService = Depends(get_service),
) -> Definition:
    try:
        definition = service.update_definition(definition_id, request.definition, request.context)
        if definition is None:
            raise HTTPException(status_code=404, detail=f"Definition not found: {definition_id}")
        return definition
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Definition update failed: {str(e)}")


@router.delete(
    "/definitions/{definition_id}",
    response_model=DeleteResponse,
    summary="Delete definition",
)
def delete_definition(
    definition_id: str = Path(..., description="Definition id"),
    service: GlossaryService = Depends(get_service),
) -> DeleteResponse:
    try:
        if not service.delete_definition(definition_id):
            raise HTTPException(status_code=404, detail=f"Definition not found: {definition_id}")
        return DeleteResponse(id=definition_id, deleted=True)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Definition deletion failed: {str(e)}")
