from typing import get_type_hints

import pytest

from app.models import Candidate, CandidateStatus, Sponsor, Student
from app.services.candidate_service import CandidateRegistry, build_full_name, with_full_name
from app.services.sponsor_service import SponsorRegistry
from app.services.student_service import StudentRegistry


def test_build_full_name_trims_and_collapses():
    assert build_full_name("  Ana  ", " Silva") == "Ana Silva"
    assert build_full_name("Ana   Maria", "Silva   Costa") == "Ana Maria Silva Costa"
    assert build_full_name(None, "Silva") == "Silva"
    assert build_full_name("", "") == ""


def test_with_full_name_keeps_legacy_full_name():
    """Sin nombre ni apellido se conserva el fullName enviado."""
    datos = with_full_name({"full_name": "  Joana   Mussa "})
    assert datos["full_name"] == "Joana Mussa"


@pytest.mark.asyncio
async def test_create_defaults_and_full_name(db_session):
    registro = CandidateRegistry(db_session)
    candidato = await registro.create({"document_id": "X1", "first_name": "  Ana  ", "last_name": " Silva"})
    assert candidato.id and len(candidato.id) == 32
    assert candidato.full_name == "Ana Silva"
    assert candidato.first_name == "Ana"
    assert candidato.status == CandidateStatus.PENDING
    assert candidato.created_at is not None
    assert candidato.updated_at is not None


@pytest.mark.asyncio
async def test_update_recomputes_full_name_from_merged_names(db_session, candidate):
    registro = CandidateRegistry(db_session)
    actualizado = await registro.update(candidate.id, {"last_name": "  Costa "})
    assert actualizado.full_name == "Ana Costa"
    assert actualizado.last_name == "Costa"


@pytest.mark.asyncio
async def test_update_is_a_plain_field_setter(db_session, candidate):
    """El registro permite 'active' sin padrino: las reglas las aplica el sincronizador."""
    registro = CandidateRegistry(db_session)
    actualizado = await registro.update(candidate.id, {"status": CandidateStatus.ACTIVE})
    assert actualizado.status == CandidateStatus.ACTIVE
    assert actualizado.sponsor_id is None


@pytest.mark.asyncio
async def test_update_missing_returns_none(db_session):
    assert await CandidateRegistry(db_session).update("no-existe", {"notes": "x"}) is None


@pytest.mark.asyncio
async def test_list_filters(db_session):
    registro = CandidateRegistry(db_session)
    await registro.create({"document_id": "A", "first_name": "A", "period": "2025"})
    await registro.create({"document_id": "B", "first_name": "B", "period": "2026", "status": "rejected"})
    assert {c.document_id for c in await registro.list()} == {"A", "B"}
    assert [c.document_id for c in await registro.list_by_status("rejected")] == ["B"]
    assert [c.document_id for c in await registro.list_by_period("2025")] == ["A"]


@pytest.mark.asyncio
async def test_list_public_strips_sensitive_fields(db_session, candidate):
    registro = CandidateRegistry(db_session)
    await registro.create({"document_id": "Z", "first_name": "Sin", "last_name": "Tutor"})
    await registro.create({"document_id": "R", "first_name": "Re", "status": "rejected"})

    publicos = await registro.list_public()
    assert len(publicos) == 2
    por_id = {p.id: p for p in publicos}
    ana = por_id[candidate.id]
    assert ana.guardian.relationship == "madre"
    dump = ana.model_dump(by_alias=True)
    assert "household" not in dump
    assert "audit" not in dump
    assert dump["guardian"] == {"relationship": "madre"}
    for campo in ("documentId", "notes", "updatedAt", "sponsorId", "sponsorAssignedDate", "photoPath"):
        assert campo in dump
    assert dump["documentId"] == "DOC-001"
    sin_tutor = next(p for p in publicos if p.id != candidate.id)
    assert sin_tutor.guardian.relationship == ""


@pytest.mark.asyncio
async def test_delete(db_session, candidate):
    registro = CandidateRegistry(db_session)
    assert await registro.delete(candidate.id) is True
    assert await registro.get_by_id(candidate.id) is None
    assert await registro.delete(candidate.id) is False


def test_registry_return_annotations_resolve():
    """Los métodos 'list' de los registros no tapan el tipo list en las anotaciones."""
    assert get_type_hints(CandidateRegistry.list_by_status)["return"] == list[Candidate]
    assert get_type_hints(StudentRegistry.list_by_academic_year)["return"] == list[Student]
    assert get_type_hints(SponsorRegistry.search)["return"] == list[Sponsor]
