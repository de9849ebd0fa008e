#!/usr/bin/env python3
"""
Script helper para ejecutar la API FastAPI del catálogo de recetas.
Ejecuta desde la raíz del proyecto para asegurar que Python encuentre el módulo 'api'.

Variables de entorno:
    API_HOST (default: 0.0.0.0)
    API_PORT (default: 8000)
    API_RELOAD (default: true)
"""

import os
import sys
from pathlib import Path

# Asegurar que el directorio raíz esté en el PYTHONPATH
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload = os.getenv("API_RELOAD", "true").lower() == "true"

    print(f"🚀 Iniciando API FastAPI en http://{host}:{port}")
    print(f"📖 Documentación disponible en http://{host}:{port}/docs")
    uvicorn.run("api.main:app", host=host, port=port, reload=reload)
