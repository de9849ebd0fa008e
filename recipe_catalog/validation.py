"""
Reglas de validación.

Cada validador junta todos los errores (campo -> mensajes) y lanza un único
`ValidationError`; si no hay errores no devuelve nada.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .db.models import Recipe
from .errors import ValidationError
from .schemas import CreateUpdateCuisineDto, CreateUpdateRecipeDto

MAX_ITEMS_PER_PAGE = 50
DEFAULT_ITEMS_PER_PAGE = 20

NOT_EMPTY = "no puede estar vacío."


class _Errors:
    def __init__(self) -> None:
        self.errors: Dict[str, List[str]] = {}

    def add(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _check_ingredients(errors: _Errors, ingredients: Optional[List[str]]) -> None:
    if not ingredients:
        errors.add("ingredients", f"'ingredients' {NOT_EMPTY}")
        return
    for i, ingredient in enumerate(ingredients):
        if _blank(ingredient):
            errors.add(f"ingredients[{i}]", f"'ingredients[{i}]' {NOT_EMPTY}")


def validate_paging(skip: Optional[int], take: Optional[int]) -> tuple[int, int]:
    """
    Valida skip/take y devuelve los valores efectivos (con defaults).

    Raises
    ------
    ValidationError
        Si skip < 0 o take fuera de [1, MAX_ITEMS_PER_PAGE].
    """
    errors = _Errors()

    if skip is not None and skip < 0:
        errors.add("skip", "'skip' debe ser mayor o igual a 0.")

    if take is not None and not 0 < take <= MAX_ITEMS_PER_PAGE:
        errors.add("take", f"'take' debe estar entre 1 y {MAX_ITEMS_PER_PAGE}.")

    errors.raise_if_any()

    return (
        skip if skip is not None else 0,
        take if take is not None else DEFAULT_ITEMS_PER_PAGE,
    )


def validate_recipe_dto(dto: CreateUpdateRecipeDto) -> None:
    errors = _Errors()

    if _blank(dto.name):
        errors.add("name", f"'name' {NOT_EMPTY}")

    if not dto.cuisine_id:
        errors.add("cuisine_id", f"'cuisine_id' {NOT_EMPTY}")

    _check_ingredients(errors, dto.ingredients)

    if _blank(dto.instructions):
        errors.add("instructions", f"'instructions' {NOT_EMPTY}")

    errors.raise_if_any()


def validate_recipe(recipe: Recipe) -> None:
    """
    Valida una entidad lista para persistir (incluye el HTML renderizado).
    """
    errors = _Errors()

    if not recipe.id:
        errors.add("id", f"'id' {NOT_EMPTY}")

    if _blank(recipe.owner_id):
        errors.add("owner_id", f"'owner_id' {NOT_EMPTY}")

    if _blank(recipe.name):
        errors.add("name", f"'name' {NOT_EMPTY}")

    if not recipe.cuisine_id:
        errors.add("cuisine_id", f"'cuisine_id' {NOT_EMPTY}")

    _check_ingredients(errors, recipe.ingredients)

    if _blank(recipe.instructions_markdown):
        errors.add("instructions.markdown", f"'instructions.markdown' {NOT_EMPTY}")

    if _blank(recipe.instructions_html):
        errors.add("instructions.html", f"'instructions.html' {NOT_EMPTY}")

    errors.raise_if_any()


def validate_cuisine_dto(dto: CreateUpdateCuisineDto) -> None:
    errors = _Errors()
    if _blank(dto.name):
        errors.add("name", f"'name' {NOT_EMPTY}")
    errors.raise_if_any()
