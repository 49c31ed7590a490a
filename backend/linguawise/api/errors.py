# backend/linguawise/api/errors.py
"""Mapping from domain errors to HTTP responses."""

from fastapi import HTTPException, status

from linguawise.errors import (
    GENERIC_PERSISTENCE_ERROR,
    AuthError,
    BackendCallError,
    LinguaWiseError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)


def http_error(e: LinguaWiseError, auth_status: int = status.HTTP_400_BAD_REQUEST) -> HTTPException:
    """
    Convert a domain error into the HTTPException the client sees.

    - ValidationError     -> 422, with the offending field
    - BackendCallError    -> 502, generic message (cause is only logged)
    - RecordNotFoundError -> 404
    - PersistenceError    -> 500, generic message
    - AuthError           -> auth_status, provider message verbatim
    """
    if isinstance(e, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": e.field, "message": e.message},
        )
    if isinstance(e, BackendCallError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    if isinstance(e, RecordNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, PersistenceError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERIC_PERSISTENCE_ERROR)
    if isinstance(e, AuthError):
        return HTTPException(status_code=auth_status, detail=e.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
