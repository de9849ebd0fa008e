from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from openai import OpenAI
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .db.models import Recipe
from .errors import UnavailableError

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    """
    Convierte texto en un vector de largo fijo.
    """

    def embed(self, text: str) -> List[float]:
        ...


class OpenAIEmbeddingProvider:
    """
    Embeddings vía el endpoint `embeddings` de OpenAI (o uno compatible).
    """

    def __init__(self, api_key: str, deployment: str, base_url: str | None = None) -> None:
        self.api_key = api_key
        self.deployment = deployment
        self.base_url = base_url or None
        self._client: OpenAI | None = None

    def get_client(self) -> OpenAI:
        if not self.api_key:
            raise UnavailableError("OPENAI_API_KEY no está configurada en el .env")
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def embed(self, text: str) -> List[float]:
        """
        Devuelve el embedding de `text`.

        Raises:
            UnavailableError: si falta configuración (dispara el modo fallback)
        """
        if not self.deployment:
            raise UnavailableError("OPENAI_EMBEDDINGS_DEPLOYMENT no está configurado")

        client = self.get_client()
        response = client.embeddings.create(model=self.deployment, input=[text])
        return [float(x) for x in response.data[0].embedding]


def get_embedding_provider(settings: Settings | None = None) -> Optional[EmbeddingProvider]:
    """
    Devuelve el proveedor configurado o None si no hay API key.
    """
    settings = settings or get_settings()
    if not settings.openai_api_key:
        logger.info("Sin OPENAI_API_KEY: búsqueda semántica deshabilitada")
        return None
    return OpenAIEmbeddingProvider(
        api_key=settings.openai_api_key,
        deployment=settings.openai_embeddings_deployment,
        base_url=settings.openai_base_url,
    )


def recipe_embedding_text(name: str, description: str | None, ingredients: List[str] | None) -> str:
    """
    Texto que se embebe por receta.
    """
    lines = [name.strip()]
    if description:
        lines.append(description.strip())
    if ingredients:
        lines.append("Ingredients: " + ", ".join(i.strip() for i in ingredients if i))
    return "\n".join(lines)


def backfill_embeddings(
    session: Session,
    provider: EmbeddingProvider,
    only_missing: bool = True,
    limit: Optional[int] = None,
) -> int:
    """
    Calcula y guarda embeddings de recetas.

    Args:
        session: Sesión de base de datos
        provider: Proveedor de embeddings
        only_missing: Si True, solo recetas sin embedding
        limit: Máximo de recetas a procesar

    Returns:
        Cantidad de recetas actualizadas
    """
    query = session.query(Recipe).order_by(Recipe.id)
    if only_missing:
        query = query.filter(Recipe.embedding.is_(None))
    if limit:
        query = query.limit(limit)

    updated = 0
    for recipe in query.all():
        text = recipe_embedding_text(recipe.name, recipe.description, recipe.ingredients)
        recipe.embedding = provider.embed(text)
        updated += 1

    session.flush()
    logger.info(f"Embeddings actualizados: {updated}")
    return updated
