#!/usr/bin/env python3
"""
Carga cocinas y recetas de ejemplo desde un JSON.

Las recetas quedan a nombre del usuario indicado (normalmente el admin creado
con tools/create_admin.py).

Ejecutar:
    python tools/seed_db.py data.json --owner-external-id <sub>
"""

import argparse
import sys
from pathlib import Path

# Agregar el directorio raíz al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from recipe_catalog.config import get_settings
from recipe_catalog.db.database import get_db_session, init_db
from recipe_catalog.db.helpers import get_user_by_external_id
from recipe_catalog.ids import IdGenerator
from recipe_catalog.seed import load_seed_file, seed_recipes


def main() -> None:
    ap = argparse.ArgumentParser(description="Cargar datos de ejemplo")
    ap.add_argument("path", type=Path, help="Archivo JSON con cocinas y recetas")
    ap.add_argument("--owner-external-id", required=True, help="Claim 'sub' del dueño de las recetas")
    args = ap.parse_args()

    init_db()
    cuisines = load_seed_file(args.path)

    with get_db_session() as session:
        owner = get_user_by_external_id(session, args.owner_external_id)
        if owner is None:
            print(f"❌ Usuario con external_id {args.owner_external_id} no encontrado.")
            print("   Ejecuta tools/create_admin.py primero.")
            sys.exit(1)

        id_generator = IdGenerator(generator_id=get_settings().id_generator_id)
        inserted = seed_recipes(session, cuisines, owner.id, id_generator)

    print(f"✅ {inserted} recetas insertadas en {len(cuisines)} cocinas.")


if __name__ == "__main__":
    main()
