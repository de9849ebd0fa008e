# recipe_catalog/config.py
from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv

"""
recipe_catalog.config
=====================

Gestión centralizada de configuración de la aplicación.

Este módulo define:
- La estructura de configuración (`Settings`)
- El mecanismo para cargar variables desde entorno (.env)
- Un acceso único y cacheado a la configuración (`get_settings`)

Convenciones
------------
- Las variables de entorno se cargan desde un archivo `.env` si existe.
- Los defaults están pensados para desarrollo local.
- La URL de base de datos NO vive acá: la resuelve `recipe_catalog.db.database`.

Notas importantes
-----------------
- Si no hay `OPENAI_API_KEY` o `OPENAI_EMBEDDINGS_DEPLOYMENT`, la búsqueda
  de recetas usa el modo de subcadena. No es un error.
"""

# Cargar variables de entorno desde .env (si existe)
load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """
    Contenedor tipado de configuración global de la aplicación.

    Attributes
    ----------
    openai_api_key:
        API key de OpenAI. Sin ella no hay proveedor de embeddings.
    openai_base_url:
        Endpoint compatible opcional (ej. un deployment propio).
    openai_embeddings_deployment:
        Modelo/deployment de embeddings. Vacío => búsqueda por subcadena.
    images_dir:
        Directorio raíz de las imágenes de portada.
    id_generator_id:
        Identificador del generador de IDs (0..1023).
    search_keep_closest:
        Si True, la búsqueda semántica conserva distancias <= umbral
        en lugar de >= umbral.
    jwt_secret / jwt_algorithm:
        Verificación de los tokens Bearer.
    admin_role:
        Nombre del rol de administradores.
    """

    # OpenAI
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_embeddings_deployment: str = ""

    # I/O
    images_dir: str = "images"

    # IDs
    id_generator_id: int = 0

    # Búsqueda
    search_keep_closest: bool = False

    # Auth
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    admin_role: str = "Administrator"


@lru_cache
def get_settings() -> Settings:
    """
    Devuelve una instancia única y cacheada de `Settings`.

    Variables de entorno utilizadas
    -------------------------------
    - OPENAI_API_KEY
    - OPENAI_BASE_URL
    - OPENAI_EMBEDDINGS_DEPLOYMENT
    - IMAGES_DIR (default: "images")
    - ID_GENERATOR_ID (default: 0)
    - SEARCH_KEEP_CLOSEST (default: false)
    - JWT_SECRET
    - ADMIN_ROLE (default: "Administrator")
    """
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_base_url=os.getenv("OPENAI_BASE_URL", ""),
        openai_embeddings_deployment=os.getenv("OPENAI_EMBEDDINGS_DEPLOYMENT", ""),
        images_dir=os.getenv("IMAGES_DIR", "images"),
        id_generator_id=int(os.getenv("ID_GENERATOR_ID", "0")),
        search_keep_closest=_env_bool("SEARCH_KEEP_CLOSEST"),
        jwt_secret=os.getenv("JWT_SECRET", "change-me"),
        admin_role=os.getenv("ADMIN_ROLE", "Administrator"),
    )
