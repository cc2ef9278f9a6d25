"""Import and export API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from fastapi.responses import Response

from ..core.exceptions import GlossaryError
from ..models.glossary import ImportResult
from ..models.request import ImportRequest
from ..service_instance import get_transfer
from ..services import DictionaryTransfer
from .errors import to_http_exception

router = APIRouter(prefix="/api/v1", tags=["transfer"])

MEDIA_TYPES = {
    "json": "application/json",
    "csv": "text/csv",
}


@router.post(
    "/import",
    response_model=ImportResult,
    status_code=201,
    summary="Import dictionary data",
    description="Import a JSON dictionary export or CSV rows",
)
def import_dictionary(
    request: ImportRequest,
    transfer: DictionaryTransfer = Depends(get_transfer),
) -> ImportResult:
    try:
        if request.format == "csv":
            return transfer.import_csv(request.data)
        return transfer.import_json(request.data)
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Import failed: {str(e)}")


@router.get(
    "/export/{dictionary_id}",
    summary="Export dictionary",
    description="Export a dictionary as JSON or CSV",
)
def export_dictionary(
    dictionary_id: str = Path(..., description="Dictionary id"),
    format: str = Query("json", pattern="^(json|csv)$", description="json or csv"),
    transfer: DictionaryTransfer = Depends(get_transfer),
) -> Response:
    try:
        if format == "csv":
            content = transfer.export_csv(dictionary_id)
        else:
            content = transfer.export_json(dictionary_id)
        return Response(content=content, media_type=MEDIA_TYPES[format])
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Export failed: {str(e)}")
