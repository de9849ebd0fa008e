"""
API HTTP principal del catálogo de recetas.

Esta aplicación FastAPI expone endpoints REST sobre los servicios del core
(recipe_catalog.services).

Uso:
    uvicorn api.main:app --reload --port 8000
"""

import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from recipe_catalog import __version__
from recipe_catalog.db.database import init_db

from .routes import cuisines, recipes

# Cargar variables de entorno
load_dotenv()

# Determinar ambiente
ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configurar logging según ambiente
log_level = getattr(logging, LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)
logger.info(f"🚀 Iniciando API en ambiente: {ENVIRONMENT}")

app = FastAPI(
    title="Recipe Catalog API",
    description="API del catálogo de recetas y cocinas",
    version=__version__,
)

# CORS: configurar según ambiente
cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
cors_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

logger.info(f"🌐 CORS origins configurados: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# En local se crean las tablas al arrancar (no hay migraciones)
if ENVIRONMENT == "local":
    init_db()

# Registrar rutas
app.include_router(recipes.router)
app.include_router(cuisines.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "recipe-catalog-api"}


@app.get("/health")
async def health():
    """Health check detallado."""
    return {
        "status": "ok",
        "service": "recipe-catalog-api",
        "version": __version__,
    }
