"""
Conversión entre entidades ORM y DTOs.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from .db.models import Cuisine, Recipe
from .schemas import (
    CreateUpdateRecipeDto,
    CuisineDto,
    ImageData,
    MarkdownData,
    RecipeWithCuisineDto,
)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite devuelve datetimes naive; se guardan siempre en UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def to_cuisine_dto(cuisine: Cuisine) -> CuisineDto:
    return CuisineDto(id=cuisine.id, name=cuisine.name)


def to_recipe(dto: CreateUpdateRecipeDto) -> Recipe:
    """
    Crea una entidad transitoria (sin ID, dueño ni HTML) a partir del DTO.
    """
    return Recipe(
        name=dto.name,
        cuisine_id=dto.cuisine_id,
        description=dto.description,
        ingredients=list(dto.ingredients or []),
        instructions_markdown=dto.instructions,
    )


def apply_recipe_dto(recipe: Recipe, dto: CreateUpdateRecipeDto) -> None:
    """
    Reemplaza los campos editables (semántica de reemplazo total, no patch).
    El HTML lo regenera el servicio.
    """
    recipe.name = dto.name
    recipe.cuisine_id = dto.cuisine_id
    recipe.description = dto.description
    recipe.ingredients = list(dto.ingredients or [])
    recipe.instructions_markdown = dto.instructions


def to_recipe_with_cuisine_dto(recipe: Recipe, with_details: bool = True) -> RecipeWithCuisineDto:
    """
    Args:
        recipe: Entidad (con `cuisine` cargada o cargable)
        with_details: Si False, omite ingredientes e instrucciones
    """
    cover_image = None
    if recipe.cover_image_url:
        cover_image = ImageData(url=recipe.cover_image_url, alt_text=recipe.cover_image_alt_text)

    ingredients = None
    instructions = None
    if with_details:
        ingredients = list(recipe.ingredients or [])
        if recipe.instructions_markdown is not None:
            instructions = MarkdownData(
                markdown=recipe.instructions_markdown,
                html=recipe.instructions_html or "",
            )

    return RecipeWithCuisineDto(
        id=recipe.id,
        owner_id=recipe.owner_id,
        name=recipe.name,
        cuisine=to_cuisine_dto(recipe.cuisine) if recipe.cuisine is not None else None,
        description=recipe.description,
        cover_image=cover_image,
        ingredients=ingredients,
        instructions=instructions,
        created=_as_utc(recipe.created),
        modified=_as_utc(recipe.modified),
    )
