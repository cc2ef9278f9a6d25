"""Mapping from glossary errors to HTTP errors."""

from fastapi import HTTPException

from ..core.exceptions import (
    DuplicateDictionaryError,
    DuplicateTermError,
    GlossaryError,
    InvalidSearchOptionError,
    NotFoundError,
    TextTooLongError,
    TransferError,
)

STATUS_CODES = (
    (NotFoundError, 404),
    (DuplicateDictionaryError, 409),
    (DuplicateTermError, 409),
    (InvalidSearchOptionError, 400),
    (TransferError, 400),
    (TextTooLongError, 400),
)


def to_http_exception(error: GlossaryError) -> HTTPException:
    """Translate a domain error into the matching HTTP error."""
    for error_type, status_code in STATUS_CODES:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
