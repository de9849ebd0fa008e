"""
Servicio de cocinas: listado, lectura y ABM con autorización.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..db.helpers import get_cuisine_by_id, get_cuisine_by_name
from ..db.models import Cuisine, Recipe
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..identity import Principal, current_user_id
from ..mapping import to_cuisine_dto
from ..permissions import Operation, authorize
from ..schemas import CreateUpdateCuisineDto, CuisineDto
from ..validation import validate_cuisine_dto

logger = logging.getLogger(__name__)


class CuisineService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _authorize(self, principal: Principal, cuisine: Cuisine, operation: Operation) -> None:
        if not authorize(principal, cuisine, operation):
            logger.warning(
                f"Operación {operation.value} denegada sobre cocina {cuisine.id} "
                f"para usuario {current_user_id(principal)}"
            )
            raise AuthorizationError(operation.value, "Cuisine")

    def _require_unique_name(self, name: str, cuisine_id: int | None = None) -> None:
        existing = get_cuisine_by_name(self.session, name)
        if existing is not None and existing.id != cuisine_id:
            raise ValidationError.single("name", f"Ya existe una cocina con el nombre '{name}'.")

    def list(self) -> List[CuisineDto]:
        cuisines = self.session.query(Cuisine).order_by(Cuisine.name).all()
        return [to_cuisine_dto(c) for c in cuisines]

    def get(self, cuisine_id: int) -> Optional[CuisineDto]:
        cuisine = get_cuisine_by_id(self.session, cuisine_id)
        return to_cuisine_dto(cuisine) if cuisine is not None else None

    def create(self, dto: CreateUpdateCuisineDto, principal: Principal) -> CuisineDto:
        """
        Crea una cocina.

        Raises:
            ValidationError: nombre vacío o repetido
            AuthorizationError: principal anónimo
        """
        validate_cuisine_dto(dto)

        cuisine = Cuisine(name=dto.name.strip())
        self._authorize(principal, cuisine, Operation.CREATE)
        self._require_unique_name(cuisine.name)

        self.session.add(cuisine)
        self.session.flush()

        logger.info(f"Cocina {cuisine.id} ({cuisine.name}) creada por {current_user_id(principal)}")
        return to_cuisine_dto(cuisine)

    def update(self, cuisine_id: int, dto: CreateUpdateCuisineDto, principal: Principal) -> CuisineDto:
        """
        Renombra una cocina (solo administradores).
        """
        validate_cuisine_dto(dto)

        cuisine = get_cuisine_by_id(self.session, cuisine_id)
        if cuisine is None:
            raise NotFoundError("Cocina", cuisine_id)

        self._authorize(principal, cuisine, Operation.UPDATE)

        name = dto.name.strip()
        self._require_unique_name(name, cuisine_id)
        cuisine.name = name
        self.session.flush()

        logger.info(f"Cocina {cuisine.id} renombrada a {cuisine.name}")
        return to_cuisine_dto(cuisine)

    def delete(self, cuisine_id: int, principal: Principal) -> None:
        """
        Elimina una cocina (solo administradores).

        Raises:
            ValidationError: si todavía hay recetas que la referencian
        """
        cuisine = get_cuisine_by_id(self.session, cuisine_id)
        if cuisine is None:
            raise NotFoundError("Cocina", cuisine_id)

        self._authorize(principal, cuisine, Operation.DELETE)

        in_use = self.session.query(Recipe.id).filter(Recipe.cuisine_id == cuisine_id).count()
        if in_use:
            raise ValidationError.single(
                "id", f"La cocina {cuisine_id} tiene {in_use} recetas asociadas."
            )

        self.session.delete(cuisine)
        self.session.flush()

        logger.info(f"Cocina {cuisine_id} eliminada por {current_user_id(principal)}")
