"""
Búsqueda por vecinos cercanos sobre los embeddings de recetas.

`RecipeService` solo conoce el protocolo `NearestNeighborSearch`; hoy la única
implementación es un escaneo lineal de toda la tabla (sirve para datasets
chicos). Un índice real (pgvector, etc.) se enchufa implementando el mismo
protocolo.
"""

from __future__ import annotations

import math
from typing import List, Protocol, Sequence, Tuple

from sqlalchemy.orm import Session

from .db.helpers import iter_recipe_embeddings


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if not a or not b or len(a) != len(b):
        return 0.0
    dot = 0.0
    na = 0.0
    nb = 0.0
    for x, y in zip(a, b):
        dot += float(x) * float(y)
        na += float(x) * float(x)
        nb += float(y) * float(y)
    if na <= 0 or nb <= 0:
        return 0.0
    return dot / (math.sqrt(na) * math.sqrt(nb))


def cosine_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """1 - similitud coseno: 0 = misma dirección, 2 = opuestos."""
    return 1.0 - cosine_similarity(a, b)


class NearestNeighborSearch(Protocol):
    def distances(self, session: Session, query_vector: Sequence[float]) -> List[Tuple[int, float]]:
        """
        Devuelve (recipe_id, distancia coseno) para cada receta con embedding.
        """
        ...


class LinearScanSearch:
    """
    Recorre todos los embeddings guardados y calcula la distancia en Python.
    """

    def distances(self, session: Session, query_vector: Sequence[float]) -> List[Tuple[int, float]]:
        return [
            (recipe_id, cosine_distance(query_vector, embedding))
            for recipe_id, embedding in iter_recipe_embeddings(session)
        ]
