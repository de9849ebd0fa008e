#!/usr/bin/env python3
"""
Crea un usuario administrador (o le asigna el rol si ya existe).

El `external_id` debe coincidir con el claim `sub` de los tokens que emite
el proveedor de identidad.

Ejecutar:
    python tools/create_admin.py --external-id <sub> --email admin@example.com --name "Admin"
"""

import argparse
import sys
from pathlib import Path

# Agregar el directorio raíz al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from recipe_catalog.config import get_settings
from recipe_catalog.db.database import get_db_session, init_db
from recipe_catalog.db.helpers import assign_role, create_user, get_user_by_external_id


def create_admin(external_id: str, email: str, name: str = "") -> str:
    """
    Devuelve el ID local del usuario administrador.
    """
    role_name = get_settings().admin_role

    with get_db_session() as session:
        user = get_user_by_external_id(session, external_id)
        if user:
            print(f"⚠️  Usuario {user.email} ya existe (id: {user.id}).")
            assign_role(session, user, role_name)
        else:
            user = create_user(session, external_id=external_id, email=email, name=name, roles=[role_name])
            print(f"✅ Usuario {email} creado (id: {user.id}).")

        print(f"✅ Rol '{role_name}' asignado.")
        return user.id


def main() -> None:
    ap = argparse.ArgumentParser(description="Crear usuario administrador")
    ap.add_argument("--external-id", required=True, help="Claim 'sub' del proveedor de identidad")
    ap.add_argument("--email", required=True)
    ap.add_argument("--name", default="")
    args = ap.parse_args()

    init_db()
    create_admin(args.external_id, args.email, args.name)


if __name__ == "__main__":
    main()
