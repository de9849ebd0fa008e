"""
Traducción de errores del core a respuestas HTTP.
"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from recipe_catalog.errors import (
    AuthorizationError,
    NotFoundError,
    RecipeCatalogError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def to_http_exception(error: RecipeCatalogError) -> HTTPException:
    """
    - ValidationError    -> 400 con errores por campo
    - NotFoundError      -> 404
    - AuthorizationError -> 403
    - otro               -> 500
    """
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=400,
            detail={"title": str(error), "errors": error.errors},
        )
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, AuthorizationError):
        return HTTPException(status_code=403, detail=str(error))
    return HTTPException(status_code=500, detail=f"Error interno: {str(error)}")


def commit_or_500(session: Session) -> None:
    """
    Confirma la unidad de trabajo del request antes de armar la respuesta.

    Raises:
        HTTPException 500: si el commit falla (la sesión queda con rollback)
    """
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Error al confirmar la transacción: {e}")
        raise HTTPException(status_code=500, detail=f"Error interno: {str(e)}") from e
