"""
Funciones helper para trabajar con los modelos ORM.

Estas funciones facilitan:
- Obtener recetas/cocinas por ID con sus relaciones cargadas
- Construir las queries filtradas que usan los servicios
- Gestionar usuarios y roles (identidad local)
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session, joinedload

from .models import Cuisine, Recipe, Role, User


# =========================================================
# Recetas
# =========================================================

def get_recipe_by_id(session: Session, recipe_id: int, with_cuisine: bool = True) -> Recipe | None:
    """
    Obtiene una receta por su ID.

    Args:
        session: Sesión de base de datos
        recipe_id: ID de la receta
        with_cuisine: Si True, carga la cocina en la misma query

    Returns:
        Recipe o None si no existe
    """
    query = session.query(Recipe)
    if with_cuisine:
        query = query.options(joinedload(Recipe.cuisine))
    return query.filter(Recipe.id == recipe_id).first()


def recipes_query(session: Session, cuisine_ids: Iterable[int] | None = None) -> Query:
    """
    Query base de recetas, opcionalmente filtrada por un conjunto de cocinas.
    """
    query = session.query(Recipe)
    cuisine_ids = list(cuisine_ids or [])
    if cuisine_ids:
        query = query.filter(Recipe.cuisine_id.in_(cuisine_ids))
    return query


def text_search_query(session: Session, text: str) -> Query:
    """
    Query de recetas cuyo nombre o descripción contiene `text`.

    La sensibilidad a mayúsculas depende del collation de la base
    (en SQLite, LIKE no distingue mayúsculas en ASCII).
    """
    return session.query(Recipe).filter(
        or_(
            Recipe.name.contains(text, autoescape=True),
            Recipe.description.contains(text, autoescape=True),
        )
    )


def page(query: Query, skip: int, take: int) -> list[Recipe]:
    """
    Aplica orden "más nuevas primero" y la ventana skip/take.
    """
    return (
        query.options(joinedload(Recipe.cuisine))
        .order_by(Recipe.id.desc())
        .offset(skip)
        .limit(take)
        .all()
    )


def iter_recipe_embeddings(session: Session) -> Iterator[Tuple[int, list]]:
    """
    Itera (id, embedding) de las recetas que tienen embedding guardado.
    """
    rows = (
        session.query(Recipe.id, Recipe.embedding)
        .filter(Recipe.embedding.isnot(None))
        .yield_per(500)
    )
    for recipe_id, embedding in rows:
        if embedding:
            yield recipe_id, embedding


# =========================================================
# Cocinas
# =========================================================

def get_cuisine_by_id(session: Session, cuisine_id: int) -> Cuisine | None:
    return session.query(Cuisine).filter_by(id=cuisine_id).first()


def get_cuisine_by_name(session: Session, name: str) -> Cuisine | None:
    return session.query(Cuisine).filter_by(name=name).first()


def get_or_create_cuisine(session: Session, name: str) -> Cuisine:
    """
    Devuelve la cocina con ese nombre, creándola si no existe.
    """
    cuisine = get_cuisine_by_name(session, name)
    if cuisine is None:
        cuisine = Cuisine(name=name)
        session.add(cuisine)
        session.flush()  # Para obtener el ID
    return cuisine


# =========================================================
# Usuarios y roles
# =========================================================

def get_user_by_external_id(session: Session, external_id: str) -> User | None:
    """
    Obtiene un usuario por su ID en el proveedor de identidad.
    """
    return session.query(User).filter_by(external_id=external_id).first()


def user_has_role(session: Session, user_id: str, role_name: str) -> bool:
    """
    Verifica si un usuario tiene un rol.

    Args:
        session: Sesión de base de datos
        user_id: ID del usuario local
        role_name: Nombre del rol (ej. "Administrator")

    Returns:
        True si tiene el rol, False en caso contrario
    """
    return (
        session.query(Role)
        .join(Role.users)
        .filter(Role.name == role_name, User.id == user_id)
        .first()
        is not None
    )


def get_or_create_role(session: Session, name: str) -> Role:
    role = session.query(Role).filter_by(name=name).first()
    if role is None:
        role = Role(name=name)
        session.add(role)
        session.flush()
    return role


def create_user(
    session: Session,
    external_id: str,
    email: str,
    name: str = "",
    roles: Optional[Iterable[str]] = None,
) -> User:
    """
    Crea un usuario local y le asigna roles.

    Args:
        session: Sesión de base de datos
        external_id: ID del usuario en el proveedor de identidad (claim `sub`)
        email: Email (único)
        name: Nombre visible
        roles: Nombres de roles a asignar (se crean si no existen)

    Returns:
        User creado
    """
    user = User(external_id=external_id, email=email, name=name)
    for role_name in roles or []:
        user.roles.append(get_or_create_role(session, role_name))
    session.add(user)
    session.flush()
    return user


def assign_role(session: Session, user: User, role_name: str) -> None:
    """
    Asigna un rol a un usuario (idempotente).
    """
    role = get_or_create_role(session, role_name)
    if role not in user.roles:
        user.roles.append(role)
