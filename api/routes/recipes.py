"""
Endpoint para gestionar recetas.

Este endpoint maneja:
- GET /api/v1/recipes: Listar recetas (paginado, filtro por cocinas)
- GET /api/v1/recipes/search: Buscar recetas por texto
- GET /api/v1/recipes/{recipe_id}: Obtener una receta
- GET /api/v1/recipes/{recipe_id}/cover-image: Descargar la portada
- POST /api/v1/recipes: Crear una receta
- PUT /api/v1/recipes/{recipe_id}: Reemplazar una receta
- DELETE /api/v1/recipes/{recipe_id}: Eliminar una receta
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import FileResponse

from recipe_catalog.errors import RecipeCatalogError
from recipe_catalog.identity import Principal
from recipe_catalog.schemas import CreateUpdateRecipeDto, PagedResult, RecipeWithCuisineDto
from recipe_catalog.services import RecipeService

from ..dependencies import get_principal, get_recipe_service
from ..errors import commit_or_500, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


@router.get(
    "",
    response_model=PagedResult[RecipeWithCuisineDto],
    response_model_exclude_none=True,
)
async def list_recipes(
    skip: Optional[int] = Query(None, description="Cantidad de recetas a saltear"),
    take: Optional[int] = Query(None, description="Tamaño de página (1-50)"),
    cuisine_ids: Optional[List[int]] = Query(None, description="Filtrar por IDs de cocina"),
    with_details: Optional[bool] = Query(None, description="Incluir ingredientes e instrucciones"),
    service: RecipeService = Depends(get_recipe_service),
):
    """
    Lista recetas, más nuevas primero.

    Raises:
        400: skip/take fuera de rango
    """
    try:
        return service.list(skip=skip, take=take, cuisine_ids=cuisine_ids, with_details=with_details)
    except RecipeCatalogError as e:
        raise to_http_exception(e) from e


@router.get(
    "/search",
    response_model=PagedResult[RecipeWithCuisineDto],
    response_model_exclude_none=True,
)
async def search_recipes(
    query: str = Query(..., description="Texto a buscar"),
    skip: Optional[int] = Query(None, description="Cantidad de recetas a saltear"),
    take: Optional[int] = Query(None, description="Tamaño de página (1-50)"),
    service: RecipeService = Depends(get_recipe_service),
):
    """
    Busca recetas (semántica si hay embeddings configurados, por texto si no).
    """
    try:
        return service.search(query, skip=skip, take=take)
    except RecipeCatalogError as e:
        raise to_http_exception(e) from e


@router.get(
    "/{recipe_id}",
    response_model=RecipeWithCuisineDto,
    response_model_exclude_none=True,
)
async def get_recipe(recipe_id: int, service: RecipeService = Depends(get_recipe_service)):
    """
    Obtiene una receta por su ID.

    Raises:
        404: Si la receta no existe
    """
    recipe = service.get(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Receta {recipe_id} no encontrada")
    return recipe


@router.get("/{recipe_id}/cover-image")
async def get_cover_image(recipe_id: int, service: RecipeService = Depends(get_recipe_service)):
    """
    Devuelve el archivo de portada.

    Raises:
        404: receta inexistente, sin portada, o archivo ausente en disco
    """
    try:
        path = service.get_cover_image_path(recipe_id)
    except RecipeCatalogError as e:
        raise to_http_exception(e) from e

    if not path.is_file():
        logger.warning(f"Portada de receta {recipe_id} no existe en disco: {path}")
        raise HTTPException(status_code=404, detail=f"Portada de receta {recipe_id} no encontrada")

    return FileResponse(path)


@router.post(
    "",
    status_code=201,
    response_model=RecipeWithCuisineDto,
    response_model_exclude_none=True,
)
async def create_recipe(
    request: CreateUpdateRecipeDto,
    response: Response,
    principal: Principal = Depends(get_principal),
    service: RecipeService = Depends(get_recipe_service),
):
    """
    Crea una receta. El dueño es el usuario autenticado.

    Raises:
        400: DTO inválido
        403: usuario no autenticado
    """
    try:
        recipe = service.create(request, principal)
    except RecipeCatalogError as e:
        raise to_http_exception(e) from e

    commit_or_500(service.session)

    response.headers["Location"] = f"/api/v1/recipes/{recipe.id}"
    return recipe


@router.put(
    "/{recipe_id}",
    response_model=RecipeWithCuisineDto,
    response_model_exclude_none=True,
)
async def update_recipe(
    recipe_id: int,
    request: CreateUpdateRecipeDto,
    principal: Principal = Depends(get_principal),
    service: RecipeService = Depends(get_recipe_service),
):
    """
    Reemplaza una receta existente.

    Raises:
        400: DTO inválido
        403: ni administrador ni dueño
        404: la receta no existe
    """
    try:
        updated = service.update(recipe_id, request, principal)
    except RecipeCatalogError as e:
        raise to_http_exception(e) from e

    commit_or_500(service.session)
    return updated


@router.delete("/{recipe_id}", status_code=204)
async def delete_recipe(
    recipe_id: int,
    principal: Principal = Depends(get_principal),
    service: RecipeService = Depends(get_recipe_service),
):
    """
    Elimina una receta (solo administradores).

    Raises:
        403: no es administrador
        404: la receta no existe
    """
    try:
        service.delete(recipe_id, principal)
    except RecipeCatalogError as e:
        raise to_http_exception(e) from e

    commit_or_500(service.session)

    return Response(status_code=204)
