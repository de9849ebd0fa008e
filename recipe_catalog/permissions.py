"""
Políticas de autorización por recurso.

Este módulo responde "¿puede el principal P ejecutar la operación O sobre el
recurso R?". Es puro: no toca la base; la identidad (ID y rol) ya viene
resuelta en el `Principal`.

Políticas
---------
- Recipe:  READ todos | CREATE autenticados | UPDATE admin o dueño | DELETE admin
- Cuisine: READ todos | CREATE autenticados | UPDATE/DELETE admin

Cualquier otra combinación se deniega.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict

from .db.models import Cuisine, Recipe
from .identity import Principal, current_user_id, is_admin


class Operation(str, Enum):
    CREATE = "Create"
    READ = "Read"
    UPDATE = "Update"
    DELETE = "Delete"


def _recipe_policy(principal: Principal, recipe: Recipe, operation: Operation) -> bool:
    if operation is Operation.READ:
        return True

    if not principal.is_authenticated:
        return False

    if operation is Operation.CREATE:
        return True

    if operation is Operation.UPDATE:
        return is_admin(principal) or (
            recipe.owner_id is not None and recipe.owner_id == current_user_id(principal)
        )

    if operation is Operation.DELETE:
        return is_admin(principal)

    return False


def _cuisine_policy(principal: Principal, cuisine: Cuisine, operation: Operation) -> bool:
    if operation is Operation.READ:
        return True

    if not principal.is_authenticated:
        return False

    if operation is Operation.CREATE:
        return True

    if operation in (Operation.UPDATE, Operation.DELETE):
        return is_admin(principal)

    return False


POLICIES: Dict[type, Callable[[Principal, object, Operation], bool]] = {
    Recipe: _recipe_policy,
    Cuisine: _cuisine_policy,
}


def authorize(principal: Principal, resource: object, operation: Operation) -> bool:
    """
    Evalúa la política registrada para el tipo del recurso.

    Args:
        principal: Quién llama (puede ser anónimo)
        resource: Instancia del recurso (puede ser transitoria, ej. en CREATE)
        operation: Operación pedida

    Returns:
        True si está permitido; False si se deniega o no hay política
    """
    policy = POLICIES.get(type(resource))
    if policy is None:
        return False
    return policy(principal, resource, operation)
