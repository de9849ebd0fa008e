#!/usr/bin/env python3
"""
Calcula embeddings de recetas para habilitar la búsqueda semántica.

Por defecto solo procesa recetas sin embedding.

Ejecutar:
    python tools/backfill_embeddings.py [--limit N] [--all]
"""

import argparse
import sys
from pathlib import Path

# Agregar el directorio raíz al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from recipe_catalog.db.database import get_db_session, init_db
from recipe_catalog.embeddings import backfill_embeddings, get_embedding_provider
from recipe_catalog.errors import UnavailableError


def main() -> None:
    ap = argparse.ArgumentParser(description="Calcular embeddings de recetas")
    ap.add_argument("--limit", type=int, default=None, help="Máximo de recetas a procesar")
    ap.add_argument("--all", action="store_true", help="Recalcular también las que ya tienen embedding")
    args = ap.parse_args()

    provider = get_embedding_provider()
    if provider is None:
        print("❌ OPENAI_API_KEY no está configurada en el .env")
        sys.exit(1)

    init_db()
    try:
        with get_db_session() as session:
            updated = backfill_embeddings(
                session,
                provider,
                only_missing=not args.all,
                limit=args.limit,
            )
    except UnavailableError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"✅ {updated} recetas actualizadas.")


if __name__ == "__main__":
    main()
