"""
Fixtures compartidas.

La base de tests es SQLite en memoria: las variables de entorno se fijan
antes de importar `recipe_catalog` (la URL se lee al importar el módulo).
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-for-recipe-catalog-tests-0123456789"
os.environ["OPENAI_API_KEY"] = ""
os.environ["OPENAI_EMBEDDINGS_DEPLOYMENT"] = ""
os.environ["IMAGES_DIR"] = tempfile.mkdtemp(prefix="recipe-catalog-images-")
os.environ["ENVIRONMENT"] = "test"

from typing import Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from recipe_catalog.config import Settings, get_settings  # noqa: E402
from recipe_catalog.db import models  # noqa: E402,F401
from recipe_catalog.db.database import Base, get_db_engine, get_db_session  # noqa: E402
from recipe_catalog.db.helpers import create_user, get_or_create_cuisine  # noqa: E402
from recipe_catalog.errors import UnavailableError  # noqa: E402
from recipe_catalog.identity import Principal  # noqa: E402
from recipe_catalog.ids import IdGenerator  # noqa: E402
from recipe_catalog.schemas import CreateUpdateRecipeDto  # noqa: E402
from recipe_catalog.services import CuisineService, RecipeService  # noqa: E402


class FakeEmbeddingProvider:
    """Devuelve vectores fijos por texto; cuenta las llamadas."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None):
        self.vectors = vectors or {}
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        return self.vectors.get(text, [1.0, 0.0])


class UnavailableEmbeddingProvider:
    def __init__(self):
        self.calls = 0

    def embed(self, text: str) -> List[float]:
        self.calls += 1
        raise UnavailableError("sin deployment")


@pytest.fixture(autouse=True)
def fresh_db():
    """Recrea las tablas en cada test."""
    engine = get_db_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def session():
    """Sesión de base de datos para tests."""
    with get_db_session() as s:
        yield s


@pytest.fixture
def user(session: Session):
    return create_user(session, external_id="user-sub", email="user@example.com", name="User")


@pytest.fixture
def other_user(session: Session):
    return create_user(session, external_id="other-sub", email="other@example.com", name="Other")


@pytest.fixture
def admin(session: Session):
    return create_user(
        session,
        external_id="admin-sub",
        email="admin@example.com",
        name="Admin",
        roles=[get_settings().admin_role],
    )


@pytest.fixture
def user_principal(user):
    return Principal(user_id=user.id)


@pytest.fixture
def other_principal(other_user):
    return Principal(user_id=other_user.id)


@pytest.fixture
def admin_principal(admin):
    return Principal(user_id=admin.id, is_admin=True)


@pytest.fixture
def anonymous():
    return Principal.anonymous()


@pytest.fixture
def italian(session: Session):
    return get_or_create_cuisine(session, "Italian")


@pytest.fixture
def mexican(session: Session):
    return get_or_create_cuisine(session, "Mexican")


@pytest.fixture
def settings(tmp_path):
    return Settings(images_dir=str(tmp_path))


@pytest.fixture
def id_generator():
    return IdGenerator()


@pytest.fixture
def recipe_service(session: Session, id_generator, settings):
    return RecipeService(session=session, id_generator=id_generator, settings=settings)


@pytest.fixture
def cuisine_service(session: Session):
    return CuisineService(session)


@pytest.fixture
def make_dto(italian):
    def _make(**overrides) -> CreateUpdateRecipeDto:
        data = {
            "name": "Lasagna",
            "cuisine_id": italian.id,
            "description": "Layered pasta with ragù",
            "ingredients": ["pasta sheets", "ragù", "béchamel"],
            "instructions": "This is a test.",
        }
        data.update(overrides)
        return CreateUpdateRecipeDto(**data)

    return _make
