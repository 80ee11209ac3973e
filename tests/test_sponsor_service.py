import pytest

from app.services.sponsor_service import SponsorRegistry


@pytest.fixture
async def registro(db_session):
    registro = SponsorRegistry(db_session)
    for nombre, apellido, email in (
        ("Maria", "Gonzalez", "maria@example.com"),
        ("Pedro", "Alves", "pedro@example.com"),
        ("Ana", "Gonzaga", "ana@example.com"),
    ):
        await registro.create({"first_name": nombre, "last_name": apellido, "email": email})
    return registro


@pytest.mark.asyncio
async def test_list_ordered_by_last_then_first_name(registro):
    assert [s.last_name for s in await registro.list()] == ["Alves", "Gonzaga", "Gonzalez"]


@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(registro):
    assert {s.first_name for s in await registro.search("GONZA")} == {"Maria", "Ana"}
    assert [s.first_name for s in await registro.search("  pedro ")] == ["Pedro"]


@pytest.mark.asyncio
async def test_search_matches_full_name(registro):
    assert [s.email for s in await registro.search("maria gonz")] == ["maria@example.com"]
    assert await registro.search("maria alves") == []


@pytest.mark.asyncio
async def test_blank_search_returns_empty_list(registro):
    assert await registro.search("") == []
    assert await registro.search("   ") == []
    assert await registro.search(None) == []


@pytest.mark.asyncio
async def test_update_ignores_null_email(db_session, sponsor):
    registro = SponsorRegistry(db_session)
    actualizado = await registro.update(sponsor.id, {"email": None, "phone": "123"})
    assert actualizado.email == "maria@example.com"
    assert actualizado.phone == "123"
    assert await registro.update("no-existe", {"phone": "1"}) is None


@pytest.mark.asyncio
async def test_list_by_candidate_ids(db_session):
    registro = SponsorRegistry(db_session)
    legado = await registro.create(
        {"first_name": "L", "last_name": "Legado", "email": "l@example.com", "candidate_ids": ["c1", "c2"]}
    )
    await registro.create({"first_name": "N", "last_name": "Nuevo", "email": "n@example.com"})
    assert [s.id for s in await registro.list_by_candidate_ids("c2")] == [legado.id]
    assert await registro.list_by_candidate_ids("c3") == []


@pytest.mark.asyncio
async def test_delete(db_session, sponsor):
    registro = SponsorRegistry(db_session)
    assert await registro.delete(sponsor.id) is True
    assert await registro.get_by_id(sponsor.id) is None
