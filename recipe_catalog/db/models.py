"""
Modelos ORM del catálogo de recetas.

- Cuisine: tipo de cocina (ej. "Italian").
- Recipe: receta con ingredientes, instrucciones (Markdown + HTML renderizado),
  portada opcional y embedding opcional.
- User / Role: identidad local (el proveedor de identidad es externo; acá solo
  guardamos el `external_id` y los roles).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """
    Usuario local vinculado al proveedor de identidad por `external_id`.
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    external_id: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200), default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relaciones
    roles: Mapped[list["Role"]] = relationship(secondary=user_roles, back_populates="users")
    recipes: Mapped[list["Recipe"]] = relationship(back_populates="owner")


class Role(Base):
    """
    Rol asignable a usuarios (ej. "Administrator").
    """
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, index=True)

    users: Mapped[list["User"]] = relationship(secondary=user_roles, back_populates="roles")


class Cuisine(Base):
    """
    Tipo de cocina. Cada receta referencia exactamente una.
    """
    __tablename__ = "cuisines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True)

    recipes: Mapped[list["Recipe"]] = relationship(back_populates="cuisine")


class Recipe(Base):
    """
    Receta del catálogo.

    El `id` lo asigna el generador de IDs (snowflake), no la base: por eso
    ordenar por `id` descendente equivale a "más nuevas primero".

    `instructions_html` siempre es el render de `instructions_markdown` en la
    última escritura; ningún cliente lo setea directamente.
    """
    __tablename__ = "recipes"

    # Identidad
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    owner_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    cuisine_id: Mapped[int] = mapped_column(Integer, ForeignKey("cuisines.id"), index=True)

    # Contenido
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ingredients: Mapped[list] = mapped_column(JSON, default=list)  # lista ordenada de strings

    # Instrucciones (valor propio: Markdown crudo + HTML renderizado)
    instructions_markdown: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    instructions_html: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Portada (URL relativa al directorio de imágenes)
    cover_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    cover_image_alt_text: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Embedding (se produce fuera de banda, ver tools/backfill_embeddings.py)
    embedding: Mapped[Optional[list]] = mapped_column(JSON(none_as_null=True), nullable=True)

    created: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    modified: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relaciones
    cuisine: Mapped["Cuisine"] = relationship(back_populates="recipes")
    owner: Mapped[Optional["User"]] = relationship(back_populates="recipes")
