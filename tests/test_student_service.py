import logging

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.models import Payment, PaymentStatus, StudentStatus
from app.services.student_service import StudentRegistry


@pytest.mark.asyncio
async def test_matriculation_numbers_are_monotonic(db_session):
    registro = StudentRegistry(db_session)
    assert await registro.generate_next_matriculation_number() == "MAT-001"

    numeros = []
    for nombre in ("Ana", "Joao", "Rui"):
        estudiante = await registro.create({"first_name": nombre, "last_name": "Test"})
        numeros.append(estudiante.matriculation_number)
    assert numeros == ["MAT-001", "MAT-002", "MAT-003"]
    assert await registro.generate_next_matriculation_number() == "MAT-004"


@pytest.mark.asyncio
async def test_matriculation_non_numeric_suffix_counts_as_zero(db_session):
    registro = StudentRegistry(db_session)
    await registro.create({"first_name": "X", "matriculation_number": "MAT-XYZ"})
    assert await registro.generate_next_matriculation_number() == "MAT-001"


@pytest.mark.asyncio
async def test_matriculation_falls_back_to_timestamp_on_query_error(db_session, monkeypatch):
    registro = StudentRegistry(db_session)

    async def falla(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("sin conexión"))

    monkeypatch.setattr(db_session, "execute", falla)
    numero = await registro.generate_next_matriculation_number()
    assert numero.startswith("MAT-")
    assert len(numero) == len("MAT-") + 6
    assert numero[4:].isdigit()


@pytest.mark.asyncio
async def test_create_defaults(db_session):
    estudiante = await StudentRegistry(db_session).create({"first_name": " Ana ", "last_name": "Silva "})
    assert estudiante.full_name == "Ana Silva"
    assert estudiante.status == StudentStatus.ACTIVE
    assert estudiante.payment_status == PaymentStatus.PENDING
    assert estudiante.total_paid == 0


@pytest.mark.asyncio
async def test_inactive_clears_sponsor_snapshot(db_session, sponsor):
    registro = StudentRegistry(db_session)
    estudiante = await registro.create(
        {
            "first_name": "Ana",
            "sponsor_id": sponsor.id,
            "sponsor": {"first_name": "Maria", "email": "maria@example.com"},
        }
    )
    actualizado = await registro.update(estudiante.id, {"status": StudentStatus.INACTIVE})
    assert actualizado.status == StudentStatus.INACTIVE
    assert actualizado.sponsor_id is None
    assert actualizado.sponsor is None
    assert actualizado.sponsor_assigned_date is None


@pytest.mark.asyncio
async def test_other_status_keeps_sponsor(db_session, sponsor):
    registro = StudentRegistry(db_session)
    estudiante = await registro.create({"first_name": "Ana", "sponsor_id": sponsor.id})
    actualizado = await registro.update(estudiante.id, {"status": StudentStatus.GRADUATED})
    assert actualizado.sponsor_id == sponsor.id


@pytest.mark.asyncio
async def test_find_by_candidate_id_warns_on_duplicates(db_session, caplog):
    registro = StudentRegistry(db_session)
    primero = await registro.create({"first_name": "A", "candidate_id": "c1"})
    await registro.create({"first_name": "B", "candidate_id": "c1"})

    with caplog.at_level(logging.WARNING, logger="app.services.student_service"):
        encontrado = await registro.find_by_candidate_id("c1")
    assert encontrado.id == primero.id
    assert "candidateId=c1" in caplog.text
    assert await registro.find_by_candidate_id("otro") is None


@pytest.mark.asyncio
async def test_set_status_by_candidate_id(db_session):
    registro = StudentRegistry(db_session)
    estudiante = await registro.create({"first_name": "A", "candidate_id": "c9"})

    assert await registro.set_status_by_candidate_id("sin-estudiante", StudentStatus.INACTIVE) is None

    actualizado = await registro.set_status_by_candidate_id("c9", StudentStatus.SUSPENDED)
    assert actualizado.id == estudiante.id
    assert actualizado.status == StudentStatus.SUSPENDED

    por_id = await registro.set_status_by_candidate_id("otro", StudentStatus.ACTIVE, student_id=estudiante.id)
    assert por_id.status == StudentStatus.ACTIVE


@pytest.mark.asyncio
async def test_delete_cascades_to_payments(db_session):
    registro = StudentRegistry(db_session)
    estudiante = await registro.create({"first_name": "A"})
    db_session.add(Payment(student_id=estudiante.id, type="enrollment", amount=20))
    await db_session.flush()

    assert await registro.delete(estudiante.id) is True
    assert await registro.get_by_id(estudiante.id) is None
    restantes = (await db_session.execute(select(Payment))).scalars().all()
    assert restantes == []
    assert await registro.delete(estudiante.id) is False


@pytest.mark.asyncio
async def test_lookups(db_session):
    registro = StudentRegistry(db_session)
    a = await registro.create({"first_name": "A", "academic_year": "2025"})
    await registro.create({"first_name": "B", "academic_year": "2026", "status": StudentStatus.INACTIVE})
    assert (await registro.get_by_matriculation_number(a.matriculation_number)).id == a.id
    assert [s.first_name for s in await registro.list_by_academic_year("2025")] == ["A"]
    assert [s.first_name for s in await registro.list_by_status(StudentStatus.INACTIVE)] == ["B"]
    assert len(await registro.list()) == 2
