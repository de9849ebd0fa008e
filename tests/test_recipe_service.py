"""
Tests del servicio de recetas.

Verifica que:
1) Crear asigna ID, dueño, fecha y renderiza el Markdown
2) La paginación se valida antes de tocar la base
3) `count` es el total filtrado, independiente de la ventana
4) UPDATE responde NotFound antes de evaluar la autorización
5) Solo administradores eliminan; dueño o admin modifican
6) La búsqueda cae a subcadena sin proveedor o si no está disponible
7) La búsqueda semántica filtra por umbral y ordena por distancia
   (y solo UnavailableError activa el fallback; otros errores se propagan)
8) La portada nunca sale del directorio de imágenes
"""

import pytest
from sqlalchemy import event

from recipe_catalog.config import Settings
from recipe_catalog.db.database import get_db_engine
from recipe_catalog.db.helpers import get_recipe_by_id
from recipe_catalog.errors import AuthorizationError, NotFoundError, ValidationError
from recipe_catalog.services import RecipeService

from .conftest import FakeEmbeddingProvider, UnavailableEmbeddingProvider


# ---------------------------------------------------------------------------
# Alta
# ---------------------------------------------------------------------------

def test_create_assigns_identity_and_renders_html(recipe_service, make_dto, user_principal, italian):
    recipe = recipe_service.create(make_dto(), user_principal)

    assert recipe.id > 0
    assert recipe.owner_id == user_principal.user_id
    assert recipe.cuisine.id == italian.id
    assert recipe.cuisine.name == "Italian"
    assert recipe.created is not None
    assert recipe.modified is None
    assert recipe.instructions.markdown == "This is a test."
    assert recipe.instructions.html == "<p>This is a test.</p>\n"
    assert recipe.ingredients == ["pasta sheets", "ragù", "béchamel"]


def test_create_ids_grow(recipe_service, make_dto, user_principal):
    first = recipe_service.create(make_dto(name="A"), user_principal)
    second = recipe_service.create(make_dto(name="B"), user_principal)

    assert second.id > first.id


def test_create_anonymous_is_denied(recipe_service, make_dto, anonymous):
    with pytest.raises(AuthorizationError):
        recipe_service.create(make_dto(), anonymous)


def test_create_invalid_dto_collects_all_errors(recipe_service, user_principal):
    from recipe_catalog.schemas import CreateUpdateRecipeDto

    with pytest.raises(ValidationError) as exc:
        recipe_service.create(CreateUpdateRecipeDto(ingredients=["ok", " "]), user_principal)

    errors = exc.value.errors
    assert set(errors) == {"name", "cuisine_id", "ingredients[1]", "instructions"}


def test_create_unknown_cuisine(recipe_service, make_dto, user_principal):
    with pytest.raises(ValidationError) as exc:
        recipe_service.create(make_dto(cuisine_id=9999), user_principal)

    assert "cuisine_id" in exc.value.errors


def test_create_escapes_raw_html(recipe_service, make_dto, user_principal):
    recipe = recipe_service.create(
        make_dto(instructions="<script>alert(1)</script>\n\nSee [site](https://example.com)"),
        user_principal,
    )

    html = recipe.instructions.html
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert 'rel="ugc"' in html


# ---------------------------------------------------------------------------
# Listado y lectura
# ---------------------------------------------------------------------------

@pytest.fixture
def executed_sql(recipe_service):
    """SQL ejecutado contra la base mientras dura el test."""
    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    engine = get_db_engine()
    event.listen(engine, "before_cursor_execute", record)
    yield statements
    event.remove(engine, "before_cursor_execute", record)


@pytest.mark.parametrize(
    "skip,take,field",
    [(-1, None, "skip"), (None, 0, "take"), (None, 51, "take")],
)
def test_list_rejects_bad_paging(recipe_service, executed_sql, skip, take, field):
    with pytest.raises(ValidationError) as exc:
        recipe_service.list(skip=skip, take=take)

    assert field in exc.value.errors
    assert executed_sql == []


def test_list_newest_first_with_total_count(recipe_service, make_dto, user_principal):
    created = [recipe_service.create(make_dto(name=f"Recipe {i}"), user_principal) for i in range(5)]

    result = recipe_service.list(skip=1, take=2)

    assert result.count == 5
    assert [r.id for r in result.items] == [created[3].id, created[2].id]


def test_list_max_page_size_is_allowed(recipe_service):
    result = recipe_service.list(take=50)

    assert result.count == 0
    assert result.items == []


def test_list_filters_by_cuisine(recipe_service, make_dto, user_principal, italian, mexican):
    recipe_service.create(make_dto(name="Lasagna"), user_principal)
    tacos = recipe_service.create(make_dto(name="Tacos", cuisine_id=mexican.id), user_principal)

    result = recipe_service.list(cuisine_ids=[mexican.id])

    assert result.count == 1
    assert result.items[0].id == tacos.id

    both = recipe_service.list(cuisine_ids=[italian.id, mexican.id])
    assert both.count == 2


def test_list_details_are_optional(recipe_service, make_dto, user_principal):
    recipe_service.create(make_dto(), user_principal)

    summary = recipe_service.list().items[0]
    assert summary.ingredients is None
    assert summary.instructions is None
    assert summary.cuisine.name == "Italian"

    detailed = recipe_service.list(with_details=True).items[0]
    assert detailed.ingredients == ["pasta sheets", "ragù", "béchamel"]
    assert detailed.instructions.html == "<p>This is a test.</p>\n"


def test_get_missing_returns_none(recipe_service):
    assert recipe_service.get(12345) is None


# ---------------------------------------------------------------------------
# Modificación y baja
# ---------------------------------------------------------------------------

def test_update_missing_is_not_found_before_authorization(recipe_service, make_dto, anonymous):
    with pytest.raises(NotFoundError):
        recipe_service.update(12345, make_dto(), anonymous)


def test_update_by_owner(recipe_service, make_dto, user_principal, mexican):
    recipe = recipe_service.create(make_dto(), user_principal)

    updated = recipe_service.update(
        recipe.id,
        make_dto(name="Enchiladas", cuisine_id=mexican.id, instructions="**Bake** it"),
        user_principal,
    )

    assert updated.id == recipe.id
    assert updated.name == "Enchiladas"
    assert updated.cuisine.name == "Mexican"
    assert updated.instructions.html == "<p><strong>Bake</strong> it</p>\n"
    assert updated.modified is not None
    assert updated.owner_id == user_principal.user_id


def test_update_by_admin(recipe_service, make_dto, user_principal, admin_principal):
    recipe = recipe_service.create(make_dto(), user_principal)

    updated = recipe_service.update(recipe.id, make_dto(name="Admin edit"), admin_principal)

    assert updated.name == "Admin edit"
    assert updated.owner_id == user_principal.user_id


def test_update_by_other_user_is_denied(recipe_service, make_dto, user_principal, other_principal):
    recipe = recipe_service.create(make_dto(), user_principal)

    with pytest.raises(AuthorizationError):
        recipe_service.update(recipe.id, make_dto(name="Hijack"), other_principal)

    assert recipe_service.get(recipe.id).name == "Lasagna"


def test_update_unknown_cuisine(recipe_service, make_dto, user_principal):
    recipe = recipe_service.create(make_dto(), user_principal)

    with pytest.raises(ValidationError) as exc:
        recipe_service.update(recipe.id, make_dto(cuisine_id=9999), user_principal)

    assert "cuisine_id" in exc.value.errors


def test_delete_requires_admin(recipe_service, make_dto, user_principal, admin_principal):
    recipe = recipe_service.create(make_dto(), user_principal)

    with pytest.raises(AuthorizationError):
        recipe_service.delete(recipe.id, user_principal)

    recipe_service.delete(recipe.id, admin_principal)

    assert recipe_service.get(recipe.id) is None


def test_delete_missing(recipe_service, admin_principal):
    with pytest.raises(NotFoundError):
        recipe_service.delete(12345, admin_principal)


# ---------------------------------------------------------------------------
# Búsqueda
# ---------------------------------------------------------------------------

@pytest.fixture
def searchable(recipe_service, make_dto, user_principal):
    carbonara = recipe_service.create(
        make_dto(name="Spaghetti Carbonara", description="Creamy pasta with guanciale"), user_principal
    )
    tacos = recipe_service.create(
        make_dto(name="Tacos al Pastor", description="Pork tacos"), user_principal
    )
    primavera = recipe_service.create(
        make_dto(name="Pasta Primavera", description="Vegetables"), user_principal
    )
    return carbonara, tacos, primavera


def test_search_substring_fallback(recipe_service, searchable):
    carbonara, _, primavera = searchable

    result = recipe_service.search("pasta")

    assert result.count == 2
    assert [r.id for r in result.items] == [primavera.id, carbonara.id]
    assert all(r.ingredients is None for r in result.items)


def test_search_substring_paging(recipe_service, searchable):
    carbonara, _, _ = searchable

    result = recipe_service.search("pasta", skip=1, take=1)

    assert result.count == 2
    assert [r.id for r in result.items] == [carbonara.id]


def test_search_validates_paging(recipe_service, executed_sql):
    with pytest.raises(ValidationError):
        recipe_service.search("pasta", take=100)

    assert executed_sql == []


def test_search_propagates_other_provider_errors(session, id_generator, tmp_path, searchable):
    class BrokenProvider:
        def embed(self, text):
            raise RuntimeError("embeddings endpoint down")

    service = RecipeService(
        session,
        id_generator,
        settings=Settings(images_dir=str(tmp_path), openai_embeddings_deployment="embeddings"),
        embedding_provider=BrokenProvider(),
    )

    with pytest.raises(RuntimeError, match="embeddings endpoint down"):
        service.search("pasta")


def test_search_provider_without_deployment_uses_substring(session, id_generator, settings, searchable):
    provider = FakeEmbeddingProvider()
    service = RecipeService(session, id_generator, settings=settings, embedding_provider=provider)

    result = service.search("tacos")

    assert result.count == 1
    assert provider.calls == []


def test_search_unavailable_provider_falls_back(session, id_generator, tmp_path, searchable):
    provider = UnavailableEmbeddingProvider()
    service = RecipeService(
        session,
        id_generator,
        settings=Settings(images_dir=str(tmp_path), openai_embeddings_deployment="embeddings"),
        embedding_provider=provider,
    )

    result = service.search("tacos")

    assert provider.calls == 1
    assert result.count == 1
    assert result.items[0].name == "Tacos al Pastor"


@pytest.fixture
def embedded(session, searchable):
    carbonara, tacos, primavera = searchable
    vectors = {
        carbonara.id: [1.0, 0.0],   # distancia 0
        tacos.id: [0.0, 1.0],       # distancia 1
        primavera.id: [-1.0, 0.0],  # distancia 2
    }
    for recipe_id, vector in vectors.items():
        get_recipe_by_id(session, recipe_id).embedding = vector
    session.flush()
    return searchable


def _semantic_service(session, id_generator, tmp_path, keep_closest=False):
    return RecipeService(
        session,
        id_generator,
        settings=Settings(
            images_dir=str(tmp_path),
            openai_embeddings_deployment="embeddings",
            search_keep_closest=keep_closest,
        ),
        embedding_provider=FakeEmbeddingProvider({"carbonara": [1.0, 0.0]}),
    )


def test_semantic_search_keeps_distances_over_threshold(session, id_generator, tmp_path, embedded):
    _, tacos, primavera = embedded
    service = _semantic_service(session, id_generator, tmp_path)

    result = service.search("carbonara")

    assert result.count == 2
    assert [r.id for r in result.items] == [tacos.id, primavera.id]
    assert all(r.instructions is None for r in result.items)


def test_semantic_search_paging(session, id_generator, tmp_path, embedded):
    _, _, primavera = embedded
    service = _semantic_service(session, id_generator, tmp_path)

    result = service.search("carbonara", skip=1, take=5)

    assert result.count == 2
    assert [r.id for r in result.items] == [primavera.id]


def test_semantic_search_keep_closest(session, id_generator, tmp_path, embedded):
    carbonara, _, _ = embedded
    service = _semantic_service(session, id_generator, tmp_path, keep_closest=True)

    result = service.search("carbonara")

    assert result.count == 1
    assert result.items[0].id == carbonara.id


def test_semantic_search_ignores_recipes_without_embedding(session, id_generator, tmp_path, embedded,
                                                           recipe_service, make_dto, user_principal):
    recipe_service.create(make_dto(name="No embedding"), user_principal)
    service = _semantic_service(session, id_generator, tmp_path)

    result = service.search("carbonara")

    assert result.count == 2


# ---------------------------------------------------------------------------
# Portada
# ---------------------------------------------------------------------------

def _set_cover(session, recipe_id, url):
    get_recipe_by_id(session, recipe_id).cover_image_url = url
    session.flush()


def test_cover_image_path(session, recipe_service, make_dto, user_principal, tmp_path):
    recipe = recipe_service.create(make_dto(), user_principal)
    _set_cover(session, recipe.id, "lasagna.png")

    path = recipe_service.get_cover_image_path(recipe.id)

    assert path == (tmp_path / "lasagna.png").resolve()


def test_cover_image_missing_recipe(recipe_service):
    with pytest.raises(NotFoundError):
        recipe_service.get_cover_image_path(12345)


def test_cover_image_not_set(recipe_service, make_dto, user_principal):
    recipe = recipe_service.create(make_dto(), user_principal)

    with pytest.raises(NotFoundError):
        recipe_service.get_cover_image_path(recipe.id)


@pytest.mark.parametrize("url", ["../secret.txt", "/etc/passwd", "images/../../x.png"])
def test_cover_image_outside_images_dir(session, recipe_service, make_dto, user_principal, url):
    recipe = recipe_service.create(make_dto(), user_principal)
    _set_cover(session, recipe.id, url)

    with pytest.raises(NotFoundError):
        recipe_service.get_cover_image_path(recipe.id)
