"""
Dependencias de FastAPI.

Este módulo proporciona dependencias reutilizables para:
- Obtener una sesión de base de datos por request (unidad de trabajo)
- Resolver el principal actual desde el token JWT
- Construir los servicios del core
"""

from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from recipe_catalog.config import get_settings
from recipe_catalog.db import database
from recipe_catalog.db.helpers import get_user_by_external_id, user_has_role
from recipe_catalog.embeddings import get_embedding_provider
from recipe_catalog.identity import Principal
from recipe_catalog.ids import IdGenerator
from recipe_catalog.services import CuisineService, RecipeService

import logging
import jwt  # pyjwt

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """
    Sesión de base de datos por request.

    El commit lo hace cada endpoint de escritura antes de responder
    (ver `commit_or_500` en api/errors.py); acá solo se hace rollback ante
    cualquier excepción y se cierra la sesión. Lo que no se commiteó se descarta.
    """
    database.get_db_engine(echo=False)
    db = database.SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@lru_cache
def get_id_generator() -> IdGenerator:
    """
    Generador de IDs compartido por el proceso (arbitra su secuencia con un lock).
    """
    return IdGenerator(generator_id=get_settings().id_generator_id)


async def get_principal(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    session: Session = Depends(get_db),
) -> Principal:
    """
    Resuelve el principal desde el header Authorization.

    - Sin header: principal anónimo (las lecturas son públicas; las
      mutaciones las deniega la política).
    - Header mal formado, token inválido o usuario desconocido: 401.

    El claim `sub` es el ID del usuario en el proveedor de identidad
    (`User.external_id`).
    """
    if not authorization:
        return Principal.anonymous()

    if not authorization.startswith("Bearer "):
        logger.warning("Authorization header no tiene formato Bearer")
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format. Expected 'Bearer <token>'"
        )

    token = authorization.replace("Bearer ", "", 1).strip()
    settings = get_settings()

    try:
        decoded = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as e:
        logger.warning(f"Token inválido: {e}")
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}") from e

    external_id = decoded.get("sub")
    if not external_id:
        raise HTTPException(status_code=401, detail="Invalid token: no user ID found")

    user = get_user_by_external_id(session, external_id)
    if user is None:
        logger.warning(f"Usuario con external_id {external_id} no encontrado en BD local")
        raise HTTPException(status_code=401, detail="User not found")

    return Principal(
        user_id=user.id,
        is_admin=user_has_role(session, user.id, settings.admin_role),
    )


def get_recipe_service(session: Session = Depends(get_db)) -> RecipeService:
    settings = get_settings()
    return RecipeService(
        session=session,
        id_generator=get_id_generator(),
        settings=settings,
        embedding_provider=get_embedding_provider(settings),
    )


def get_cuisine_service(session: Session = Depends(get_db)) -> CuisineService:
    return CuisineService(session)
