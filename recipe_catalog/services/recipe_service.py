"""
recipe_catalog.services.recipe_service
======================================

Servicio de recetas: listado paginado, lectura, alta, modificación, baja y
búsqueda.

Responsabilidades
-----------------
- Validar parámetros y DTOs (`recipe_catalog.validation`).
- Consultar la política de autorización antes de cada mutación.
- Traducir entre DTOs y entidades, y decidir cuándo re-renderizar el Markdown.
- Elegir el modo de búsqueda:
    * semántico, si hay proveedor de embeddings Y deployment configurado;
    * por subcadena (nombre o descripción), en otro caso.

El servicio no guarda estado entre requests: recibe la sesión del request y
hace `flush`; el commit/rollback lo maneja quien abrió la sesión.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..db.helpers import (
    get_cuisine_by_id,
    get_recipe_by_id,
    page,
    recipes_query,
    text_search_query,
)
from ..db.models import Cuisine, Recipe
from ..embeddings import EmbeddingProvider
from ..errors import AuthorizationError, NotFoundError, UnavailableError, ValidationError
from ..identity import Principal, current_user_id
from ..ids import IdGenerator
from ..mapping import apply_recipe_dto, to_recipe, to_recipe_with_cuisine_dto
from ..markdown_renderer import render_markdown
from ..permissions import Operation, authorize
from ..schemas import CreateUpdateRecipeDto, PagedResult, RecipeWithCuisineDto
from ..validation import (
    MAX_ITEMS_PER_PAGE,
    validate_paging,
    validate_recipe,
    validate_recipe_dto,
)
from ..vector_search import LinearScanSearch, NearestNeighborSearch

logger = logging.getLogger(__name__)

DISTANCE_THRESHOLD = 0.25

__all__ = ["RecipeService", "DISTANCE_THRESHOLD", "MAX_ITEMS_PER_PAGE"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecipeService:
    """
    Parameters
    ----------
    session:
        Sesión del request (unidad de trabajo).
    id_generator:
        Generador de IDs para recetas nuevas.
    settings:
        Configuración; por defecto `get_settings()`.
    embedding_provider:
        Proveedor opcional de embeddings. None => búsqueda por subcadena.
    nearest_neighbors:
        Backend de vecinos cercanos; por defecto escaneo lineal.
    """

    def __init__(
        self,
        session: Session,
        id_generator: IdGenerator,
        settings: Settings | None = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        nearest_neighbors: Optional[NearestNeighborSearch] = None,
    ) -> None:
        self.session = session
        self.id_generator = id_generator
        self.settings = settings or get_settings()
        self.embedding_provider = embedding_provider
        self.nearest_neighbors = nearest_neighbors or LinearScanSearch()

    # ------------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------------

    def list(
        self,
        skip: Optional[int] = None,
        take: Optional[int] = None,
        cuisine_ids: Optional[Iterable[int]] = None,
        with_details: Optional[bool] = None,
    ) -> PagedResult[RecipeWithCuisineDto]:
        """
        Lista recetas, más nuevas primero.

        Args:
            skip: Cantidad a saltear (>= 0, default 0)
            take: Tamaño de página (1..50, default 20)
            cuisine_ids: Filtro opcional por cocinas
            with_details: Si True incluye ingredientes e instrucciones

        Raises:
            ValidationError: si skip/take están fuera de rango (sin tocar la base)
        """
        skip, take = validate_paging(skip, take)

        query = recipes_query(self.session, cuisine_ids)
        count = query.count()
        recipes = page(query, skip, take)

        return PagedResult[RecipeWithCuisineDto](
            count=count,
            items=[to_recipe_with_cuisine_dto(r, bool(with_details)) for r in recipes],
        )

    def get(self, recipe_id: int) -> Optional[RecipeWithCuisineDto]:
        """
        Devuelve la receta detallada o None si no existe.
        """
        recipe = get_recipe_by_id(self.session, recipe_id)
        if recipe is None:
            return None
        return to_recipe_with_cuisine_dto(recipe)

    def get_cover_image_path(self, recipe_id: int) -> Path:
        """
        Ruta en disco de la portada de una receta.

        Raises:
            NotFoundError: si la receta no existe, no tiene portada, o la URL
                apunta fuera del directorio de imágenes
        """
        recipe = get_recipe_by_id(self.session, recipe_id, with_cuisine=False)
        if recipe is None:
            raise NotFoundError("Receta", recipe_id)

        if not recipe.cover_image_url:
            raise NotFoundError("Portada de receta", recipe_id)

        images_root = Path(self.settings.images_dir).resolve()
        path = (images_root / recipe.cover_image_url).resolve()
        if images_root not in path.parents:
            logger.warning(f"URL de portada fuera del directorio de imágenes: {recipe.cover_image_url!r}")
            raise NotFoundError("Portada de receta", recipe_id)

        return path

    # ------------------------------------------------------------------
    # Escritura
    # ------------------------------------------------------------------

    def _require_cuisine(self, cuisine_id: int) -> Cuisine:
        cuisine = get_cuisine_by_id(self.session, cuisine_id)
        if cuisine is None:
            raise ValidationError.single("cuisine_id", f"La cocina {cuisine_id} no existe.")
        return cuisine

    def _authorize(self, principal: Principal, recipe: Recipe, operation: Operation) -> None:
        if not authorize(principal, recipe, operation):
            logger.warning(
                f"Operación {operation.value} denegada sobre receta {recipe.id} "
                f"para usuario {current_user_id(principal)}"
            )
            raise AuthorizationError(operation.value, "Recipe")

    def create(self, dto: CreateUpdateRecipeDto, principal: Principal) -> RecipeWithCuisineDto:
        """
        Crea una receta.

        Pasos: validar DTO -> mapear a entidad -> autorizar CREATE -> asignar ID,
        dueño y fecha -> renderizar instrucciones -> persistir.

        Raises:
            ValidationError: DTO inválido o cocina inexistente
            AuthorizationError: principal anónimo
        """
        validate_recipe_dto(dto)

        recipe = to_recipe(dto)

        self._authorize(principal, recipe, Operation.CREATE)

        recipe.cuisine = self._require_cuisine(recipe.cuisine_id)
        recipe.id = self.id_generator.next_id()
        recipe.owner_id = current_user_id(principal)
        recipe.created = _utcnow()
        recipe.instructions_html = render_markdown(recipe.instructions_markdown)

        validate_recipe(recipe)

        self.session.add(recipe)
        self.session.flush()

        logger.info(f"Receta {recipe.id} creada por {recipe.owner_id}")
        return to_recipe_with_cuisine_dto(recipe)

    def update(self, recipe_id: int, dto: CreateUpdateRecipeDto, principal: Principal) -> RecipeWithCuisineDto:
        """
        Reemplaza los campos de una receta existente.

        Raises:
            ValidationError: DTO inválido o cocina inexistente
            NotFoundError: la receta no existe (antes de autorizar)
            AuthorizationError: ni admin ni dueño
        """
        validate_recipe_dto(dto)

        recipe = get_recipe_by_id(self.session, recipe_id)
        if recipe is None:
            raise NotFoundError("Receta", recipe_id)

        self._authorize(principal, recipe, Operation.UPDATE)

        cuisine = self._require_cuisine(dto.cuisine_id)

        apply_recipe_dto(recipe, dto)
        recipe.cuisine = cuisine
        recipe.instructions_html = render_markdown(recipe.instructions_markdown)
        recipe.modified = _utcnow()

        validate_recipe(recipe)

        self.session.flush()

        logger.info(f"Receta {recipe.id} actualizada por {current_user_id(principal)}")
        return to_recipe_with_cuisine_dto(recipe)

    def delete(self, recipe_id: int, principal: Principal) -> None:
        """
        Elimina una receta.

        Raises:
            NotFoundError: la receta no existe
            AuthorizationError: el principal no es administrador
        """
        recipe = get_recipe_by_id(self.session, recipe_id, with_cuisine=False)
        if recipe is None:
            raise NotFoundError("Receta", recipe_id)

        self._authorize(principal, recipe, Operation.DELETE)

        self.session.delete(recipe)
        self.session.flush()

        logger.info(f"Receta {recipe_id} eliminada por {current_user_id(principal)}")

    # ------------------------------------------------------------------
    # Búsqueda
    # ------------------------------------------------------------------

    def search(
        self,
        query: str,
        skip: Optional[int] = None,
        take: Optional[int] = None,
    ) -> PagedResult[RecipeWithCuisineDto]:
        """
        Busca recetas por texto libre.

        Modo semántico si hay proveedor de embeddings y deployment configurado;
        si no (o si el proveedor avisa que no está disponible), búsqueda por
        subcadena en nombre o descripción.

        Raises:
            ValidationError: si skip/take están fuera de rango
        """
        skip, take = validate_paging(skip, take)

        if self.embedding_provider is not None and self.settings.openai_embeddings_deployment:
            try:
                query_vector = self.embedding_provider.embed(query)
            except UnavailableError as e:
                logger.warning(f"Proveedor de embeddings no disponible ({e}); se usa búsqueda por subcadena")
            else:
                logger.info("Búsqueda semántica")
                return self._semantic_search(query_vector, skip, take)

        logger.info("Búsqueda por subcadena")
        return self._text_search(query, skip, take)

    def _semantic_search(self, query_vector, skip: int, take: int) -> PagedResult[RecipeWithCuisineDto]:
        distances = self.nearest_neighbors.distances(self.session, query_vector)

        if self.settings.search_keep_closest:
            kept = [(rid, d) for rid, d in distances if d <= DISTANCE_THRESHOLD]
        else:
            kept = [(rid, d) for rid, d in distances if d >= DISTANCE_THRESHOLD]

        kept.sort(key=lambda item: item[1])

        items = []
        for recipe_id, _ in kept[skip:skip + take]:
            recipe = get_recipe_by_id(self.session, recipe_id)
            if recipe is not None:
                items.append(to_recipe_with_cuisine_dto(recipe, False))

        return PagedResult[RecipeWithCuisineDto](count=len(kept), items=items)

    def _text_search(self, query: str, skip: int, take: int) -> PagedResult[RecipeWithCuisineDto]:
        results = text_search_query(self.session, query)
        count = results.count()
        recipes = page(results, skip, take)

        return PagedResult[RecipeWithCuisineDto](
            count=count,
            items=[to_recipe_with_cuisine_dto(r, False) for r in recipes],
        )
