#!/usr/bin/env python3
"""
Crea (o verifica) las tablas usando DATABASE_URL.

Ejecutar:
    python tools/init_db.py
"""

import sys
from pathlib import Path

# Agregar el directorio raíz al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from recipe_catalog.db.database import init_db


def main():
    init_db()
    print("✅ DB creada/verificada usando DATABASE_URL.")


if __name__ == "__main__":
    main()
