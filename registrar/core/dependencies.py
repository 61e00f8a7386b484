from fastapi import HTTPException, status

from registrar.core.exceptions import (
    NotFoundError,
    PersistenceError,
    RegistrarError,
    ValidationError,
)
from registrar.db.repository import Repository, SupabaseRepository
from registrar.db.supabase import get_supabase


def get_repository() -> Repository:
    """
    Dependency providing the document-store repository for a request.
    Tests override this through ``app.dependency_overrides``.
    """
    return SupabaseRepository(get_supabase())


def http_error(error: RegistrarError) -> HTTPException:
    """
    Map a registrar error onto the HTTP status the routers return for it.
    """
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)

    if isinstance(error, ValidationError):
        detail = {"message": error.message}
        if error.field:
            detail["field"] = error.field
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

    if isinstance(error, PersistenceError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error.message)

    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.message)
