"""Usage statistics API endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.exceptions import GlossaryError
from ..models.glossary import Statistics
from ..service_instance import get_service
from ..services import GlossaryService
from .errors import to_http_exception

router = APIRouter(prefix="/api/v1", tags=["statistics"])


@router.get(
    "/statistics",
    response_model=Statistics,
    summary="Glossary statistics",
    description="Counts of dictionaries, terms and definitions plus the most looked-up terms",
)
def get_statistics(
    dictionary: Optional[str] = Query(None, description="Restrict to a dictionary id or name"),
    service: GlossaryService = Depends(get_service),
) -> Statistics:
    try:
        return service.get_statistics(dictionary)
    except GlossaryError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get statistics: {str(e)}")
