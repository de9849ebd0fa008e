"""
Carga de datos de ejemplo (cocinas y recetas) desde JSON.

Formato esperado (el que produce el generador de datos):

    [
      {
        "name": "Italian",
        "recipes": [
          {
            "name": "Lasagna",
            "description": "...",
            "ingredients": ["..."],
            "instructions": {"markdown": "..."},
            "cover_image": {"url": "lasagna.png", "alt_text": "..."}
          }
        ]
      }
    ]

También se acepta el mismo documento con claves en PascalCase (`Name`,
`Recipes`, `CoverImage.AltText`, ...), que es como lo escribe el generador.

Las recetas se cargan sin pasar por la política de autorización (es una
herramienta de administración) pero sí por las mismas reglas: ID del
generador, HTML renderizado y validación de la entidad.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from .db.helpers import get_or_create_cuisine
from .db.models import Recipe
from .ids import IdGenerator
from .markdown_renderer import render_markdown
from .validation import validate_recipe

logger = logging.getLogger(__name__)


def _snake_case(key: str) -> str:
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", key).lower()


def normalize_keys(value: Any) -> Any:
    """
    Pasa recursivamente las claves de los dicts a snake_case.
    """
    if isinstance(value, dict):
        return {_snake_case(k): normalize_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [normalize_keys(v) for v in value]
    return value


def load_seed_file(path: Path) -> List[Dict[str, Any]]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("El archivo de seed debe contener una lista de cocinas")
    return data


def _instructions_markdown(item: Dict[str, Any]) -> str:
    instructions = item.get("instructions")
    if isinstance(instructions, dict):
        return instructions.get("markdown") or ""
    return instructions or item.get("instructions_markdown") or ""


def seed_recipes(
    session: Session,
    cuisines: List[Dict[str, Any]],
    owner_id: str,
    id_generator: IdGenerator,
) -> int:
    """
    Inserta cocinas y recetas. Las recetas que ya existen (mismo nombre en la
    misma cocina) se saltean.

    Returns:
        Cantidad de recetas insertadas
    """
    inserted = 0

    for cuisine_data in normalize_keys(cuisines):
        cuisine = get_or_create_cuisine(session, cuisine_data["name"])
        existing = {
            name
            for (name,) in session.query(Recipe.name).filter(Recipe.cuisine_id == cuisine.id)
        }

        for item in cuisine_data.get("recipes") or []:
            if item.get("name") in existing:
                continue

            cover = item.get("cover_image") or {}
            markdown_text = _instructions_markdown(item)

            recipe = Recipe(
                id=id_generator.next_id(),
                owner_id=owner_id,
                cuisine_id=cuisine.id,
                name=item.get("name"),
                description=item.get("description"),
                ingredients=list(item.get("ingredients") or []),
                instructions_markdown=markdown_text,
                instructions_html=render_markdown(markdown_text),
                cover_image_url=cover.get("url"),
                cover_image_alt_text=cover.get("alt_text"),
                created=datetime.now(timezone.utc),
            )
            validate_recipe(recipe)

            session.add(recipe)
            existing.add(recipe.name)
            inserted += 1

        session.flush()
        logger.info(f"Cocina {cuisine.name}: {inserted} recetas insertadas hasta ahora")

    return inserted
