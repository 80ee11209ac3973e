from datetime import datetime
from io import BytesIO

import pandas as pd
import pytest

from app.models import CandidateStatus
from app.services.candidate_import import import_candidates, read_workbook, split_full_name
from app.services.candidate_service import CandidateRegistry


def _xlsx(filas: list[dict]) -> bytes:
    buffer = BytesIO()
    pd.DataFrame(filas).to_excel(buffer, index=False, engine="openpyxl")
    return buffer.getvalue()


def test_split_full_name():
    assert split_full_name("Ana Maria  Silva") == ("Ana Maria", "Silva")
    assert split_full_name("Ana") == ("Ana", "")
    assert split_full_name("   ") == ("", "")


def test_read_workbook_rejects_bad_files():
    with pytest.raises(ValueError, match="Excel válido"):
        read_workbook(b"esto no es un excel")
    with pytest.raises(ValueError, match="documentId"):
        read_workbook(_xlsx([{"firstName": "Ana"}]))
    with pytest.raises(ValueError, match="fullName"):
        read_workbook(_xlsx([{"documentId": "D1", "level": "1ª Clase"}]))


@pytest.mark.asyncio
async def test_import_creates_pending_candidates(db_session, candidate):
    contenido = _xlsx(
        [
            {
                "documentId": "D1",
                "fullName": "Joana Maria Mussa",
                "firstName": None,
                "lastName": None,
                "priority": "ALTA",
                "birthDate": datetime(2015, 3, 1),
                "guardianRelationship": "abuela",
                "period": 2026,
            },
            {
                "documentId": "D2",
                "fullName": None,
                "firstName": "Rui",
                "lastName": "Alves",
                "priority": None,
                "birthDate": None,
                "guardianRelationship": None,
                "period": 2026,
            },
            {
                "documentId": "DOC-001",
                "fullName": "Ana Silva",
                "firstName": None,
                "lastName": None,
                "priority": None,
                "birthDate": None,
                "guardianRelationship": None,
                "period": 2026,
            },
            {
                "documentId": None,
                "fullName": "Sin Documento",
                "firstName": None,
                "lastName": None,
                "priority": None,
                "birthDate": None,
                "guardianRelationship": None,
                "period": 2026,
            },
            {
                "documentId": "D5",
                "fullName": "Prioridad Rara",
                "firstName": None,
                "lastName": None,
                "priority": "urgente",
                "birthDate": None,
                "guardianRelationship": None,
                "period": 2026,
            },
        ]
    )

    resultado = await import_candidates(db_session, contenido)

    assert resultado.total_rows == 5
    assert resultado.created == 2
    assert resultado.skipped == 1
    assert resultado.skipped_document_ids == ["DOC-001"]
    assert [(e.row, e.document_id) for e in resultado.errors] == [(5, None), (6, "D5")]

    registro = CandidateRegistry(db_session)
    joana, rui = [await registro.get_by_id(i) for i in resultado.candidate_ids]
    assert joana.first_name == "Joana Maria"
    assert joana.last_name == "Mussa"
    assert joana.full_name == "Joana Maria Mussa"
    assert joana.priority == "alta"
    assert joana.birth_date == "2015-03-01"
    assert joana.period == "2026"
    assert joana.guardian == {"relationship": "abuela"}
    assert joana.status == CandidateStatus.PENDING

    assert rui.full_name == "Rui Alves"
    assert rui.priority == "media"
    assert rui.guardian is None


@pytest.mark.asyncio
async def test_import_skips_duplicates_inside_file(db_session):
    contenido = _xlsx(
        [
            {"documentId": "X1", "fullName": "Uno"},
            {"documentId": "X1", "fullName": "Otro"},
        ]
    )
    resultado = await import_candidates(db_session, contenido)
    assert resultado.created == 1
    assert resultado.skipped == 1
    assert resultado.skipped_document_ids == ["X1"]
    assert resultado.errors == []
