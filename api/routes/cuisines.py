"""
Endpoint para gestionar cocinas.

Este endpoint maneja:
- GET /api/v1/cuisines: Listar cocinas
- GET /api/v1/cuisines/{cuisine_id}: Obtener una cocina
- POST /api/v1/cuisines: Crear una cocina
- PUT /api/v1/cuisines/{cuisine_id}: Renombrar una cocina
- DELETE /api/v1/cuisines/{cuisine_id}: Eliminar una cocina
"""

from fastapi import APIRouter, Depends, HTTPException, Response

from recipe_catalog.errors import RecipeCatalogError
from recipe_catalog.identity import Principal
from recipe_catalog.schemas import CreateUpdateCuisineDto, CuisineDto
from recipe_catalog.services import CuisineService

from ..dependencies import get_cuisine_service, get_principal
from ..errors import commit_or_500, to_http_exception

router = APIRouter(prefix="/api/v1/cuisines", tags=["cuisines"])


@router.get("", response_model=list[CuisineDto])
async def list_cuisines(service: CuisineService = Depends(get_cuisine_service)):
    """
    Lista todas las cocinas, ordenadas por nombre.
    """
    return service.list()


@router.get("/{cuisine_id}", response_model=CuisineDto)
async def get_cuisine(cuisine_id: int, service: CuisineService = Depends(get_cuisine_service)):
    cuisine = service.get(cuisine_id)
    if cuisine is None:
        raise HTTPException(status_code=404, detail=f"Cocina {cuisine_id} no encontrada")
    return cuisine


@router.post("", status_code=201, response_model=CuisineDto)
async def create_cuisine(
    request: CreateUpdateCuisineDto,
    response: Response,
    principal: Principal = Depends(get_principal),
    service: CuisineService = Depends(get_cuisine_service),
):
    """
    Crea una cocina (cualquier usuario autenticado).

    Raises:
        400: nombre vacío o repetido
        403: usuario no autenticado
    """
    try:
        cuisine = service.create(request, principal)
    except RecipeCatalogError as e:
        raise to_http_exception(e) from e

    commit_or_500(service.session)

    response.headers["Location"] = f"/api/v1/cuisines/{cuisine.id}"
    return cuisine


@router.put("/{cuisine_id}", response_model=CuisineDto)
async def update_cuisine(
    cuisine_id: int,
    request: CreateUpdateCuisineDto,
    principal: Principal = Depends(get_principal),
    service: CuisineService = Depends(get_cuisine_service),
):
    """
    Renombra una cocina (solo administradores).
    """
    try:
        updated = service.update(cuisine_id, request, principal)
    except RecipeCatalogError as e:
        raise to_http_exception(e) from e

    commit_or_500(service.session)
    return updated


@router.delete("/{cuisine_id}", status_code=204)
async def delete_cuisine(
    cuisine_id: int,
    principal: Principal = Depends(get_principal),
    service: CuisineService = Depends(get_cuisine_service),
):
    """
    Elimina una cocina sin recetas asociadas (solo administradores).
    """
    try:
        service.delete(cuisine_id, principal)
    except RecipeCatalogError as e:
        raise to_http_exception(e) from e

    commit_or_500(service.session)

    return Response(status_code=204)
