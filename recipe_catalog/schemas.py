"""
Modelos de transferencia (DTOs) del catálogo.

Estos modelos son la forma "de cable" que exponen los servicios y la API,
distinta de las entidades ORM.

Los DTOs de entrada (`CreateUpdate*`) aceptan campos vacíos: la
validación de forma la hace el servicio (`recipe_catalog.validation`) para
devolver errores por campo en un único formato.
"""

from __future__ import annotations

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class CuisineDto(BaseModel):
    """Tipo de cocina."""

    id: int = Field(..., description="ID de la cocina")
    name: str = Field(..., description="Nombre de la cocina")


class MarkdownData(BaseModel):
    """Texto Markdown y su HTML renderizado."""

    markdown: str = Field(..., description="Markdown crudo")
    html: str = Field(..., description="HTML renderizado (sin HTML crudo del usuario)")


class ImageData(BaseModel):
    """Imagen de portada."""

    url: str = Field(..., description="URL relativa al directorio de imágenes")
    alt_text: Optional[str] = Field(default=None, description="Texto alternativo")


class RecipeWithCuisineDto(BaseModel):
    """
    Receta con su cocina.

    `ingredients` e `instructions` solo vienen cargados en la vista detallada.
    """

    id: int = Field(..., description="ID de la receta")
    owner_id: Optional[str] = Field(default=None, description="ID del usuario dueño")
    name: str = Field(..., description="Nombre")
    cuisine: Optional[CuisineDto] = Field(default=None, description="Cocina")
    description: Optional[str] = Field(default=None, description="Descripción")
    cover_image: Optional[ImageData] = Field(default=None, description="Portada")
    ingredients: Optional[List[str]] = Field(default=None, description="Ingredientes en orden")
    instructions: Optional[MarkdownData] = Field(default=None, description="Instrucciones")
    created: datetime = Field(..., description="Fecha de creación (UTC)")
    modified: Optional[datetime] = Field(default=None, description="Última modificación (UTC)")


class CreateUpdateRecipeDto(BaseModel):
    """Datos para crear o reemplazar una receta."""

    name: Optional[str] = Field(default=None, description="Nombre")
    cuisine_id: Optional[int] = Field(default=None, description="ID de la cocina")
    description: Optional[str] = Field(default=None, description="Descripción")
    ingredients: Optional[List[str]] = Field(default=None, description="Ingredientes en orden")
    instructions: Optional[str] = Field(default=None, description="Instrucciones en Markdown")


class CreateUpdateCuisineDto(BaseModel):
    """Datos para crear o renombrar una cocina."""

    name: Optional[str] = Field(default=None, description="Nombre de la cocina")


class PagedResult(BaseModel, Generic[T]):
    """
    Página de resultados.

    `count` es el total filtrado, independiente de la ventana skip/take.
    """

    count: int = Field(..., description="Total de elementos que cumplen el filtro")
    items: List[T] = Field(default_factory=list, description="Elementos de la página")
