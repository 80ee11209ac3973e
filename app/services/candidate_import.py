"""Importación masiva de candidatos desde un Excel (.xlsx).

Columnas (cabecera en la primera fila, en camelCase):
    documentId (obligatoria), firstName/lastName o fullName,
    gender, birthDate, level, period, priority, reason, notes,
    city, province, country, guardianName, guardianRelationship, guardianPhone.

Con solo fullName, la última palabra es el apellido y el resto el nombre.
Los candidatos entran como 'pending' y prioridad 'media' si no se indica.
Los documentId ya existentes se omiten (no son errores). Las filas con errores
no detienen la importación: se informan al final.
"""
import logging
from datetime import date, datetime
from io import BytesIO
from typing import Any

import pandas as pd
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Candidate, CandidateStatus
from app.schemas.candidate import (
    CandidateCreate,
    CandidateImportError,
    CandidateImportResponse,
)
from app.services.candidate_service import CandidateRegistry

logger = logging.getLogger(__name__)

_COLUMNAS_OBLIGATORIAS = {"documentId"}
_COLUMNAS_NOMBRE = {"firstName", "lastName", "fullName"}

_CAMPOS_SIMPLES = {
    "gender": "gender",
    "birthDate": "birth_date",
    "level": "level",
    "period": "period",
    "priority": "priority",
    "reason": "reason",
    "notes": "notes",
    "city": "city",
    "province": "province",
    "country": "country",
}
_CAMPOS_TUTOR = {
    "guardianName": "name",
    "guardianRelationship": "relationship",
    "guardianPhone": "phone",
}


def _val(row, col) -> str | None:
    """Valor de la celda como texto limpio, o None si está vacía/NaN."""
    v = row.get(col)
    if v is None or (not isinstance(v, str) and pd.isna(v)):
        return None
    if isinstance(v, (pd.Timestamp, datetime, date)):
        return v.strftime("%Y-%m-%d")
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    s = str(v).strip()
    return s if s else None


def split_full_name(full_name: str) -> tuple[str, str]:
    """'Ana Maria Silva' -> ('Ana Maria', 'Silva'). Una sola palabra queda como nombre."""
    partes = full_name.split()
    if not partes:
        return "", ""
    if len(partes) == 1:
        return partes[0], ""
    return " ".join(partes[:-1]), partes[-1]


def row_to_candidate(row) -> dict[str, Any]:
    """Convierte una fila del Excel en los datos de alta de un candidato."""
    first = _val(row, "firstName")
    last = _val(row, "lastName")
    if not first and not last:
        first, last = split_full_name(_val(row, "fullName") or "")
    datos: dict[str, Any] = {
        "document_id": _val(row, "documentId") or "",
        "first_name": first or "",
        "last_name": last or "",
        "status": CandidateStatus.PENDING,
    }
    for columna, campo in _CAMPOS_SIMPLES.items():
        valor = _val(row, columna)
        if valor is not None:
            datos[campo] = valor
    if datos.get("priority"):
        datos["priority"] = datos["priority"].lower()
    tutor = {campo: _val(row, col) for col, campo in _CAMPOS_TUTOR.items() if _val(row, col)}
    if tutor:
        datos["guardian"] = tutor
    return datos


def read_workbook(contenido: bytes) -> pd.DataFrame:
    """Lee el Excel y valida cabeceras. ValueError si no se puede usar."""
    try:
        df = pd.read_excel(BytesIO(contenido), engine="openpyxl")
    except Exception as e:
        raise ValueError("No se pudo leer el archivo. Verifique que sea un Excel válido (.xlsx).") from e
    if df.empty:
        raise ValueError("El archivo Excel está vacío.")
    columnas = {str(c).strip() for c in df.columns}
    df.columns = [str(c).strip() for c in df.columns]
    faltantes = _COLUMNAS_OBLIGATORIAS - columnas
    if faltantes:
        raise ValueError(f"Faltan columnas obligatorias: {', '.join(sorted(faltantes))}")
    if not columnas & _COLUMNAS_NOMBRE:
        raise ValueError("Falta la columna firstName/lastName o fullName")
    return df


async def import_candidates(db: AsyncSession, contenido: bytes) -> CandidateImportResponse:
    df = read_workbook(contenido)
    registro = CandidateRegistry(db)

    res = await db.execute(select(Candidate.document_id))
    existentes = {d for d in res.scalars().all() if d}

    errores: list[CandidateImportError] = []
    creados: list[str] = []
    omitidos: list[str] = []

    for idx, row in df.iterrows():
        fila = int(idx) + 2
        datos = row_to_candidate(row)
        documento = datos["document_id"] or None
        if not documento:
            errores.append(CandidateImportError(row=fila, error="documentId vacío"))
            continue
        if documento in existentes:
            omitidos.append(documento)
            continue
        try:
            alta = CandidateCreate.model_validate(datos)
        except ValidationError as e:
            mensaje = "; ".join(err["msg"] for err in e.errors())
            errores.append(CandidateImportError(row=fila, document_id=documento, error=mensaje))
            continue
        candidato = await registro.create(alta.model_dump(exclude_none=True))
        existentes.add(documento)
        creados.append(candidato.id)

    logger.info(
        "Importación de candidatos: %d creados, %d omitidos, %d errores",
        len(creados),
        len(omitidos),
        len(errores),
    )
    return CandidateImportResponse(
        total_rows=len(df),
        created=len(creados),
        skipped=len(omitidos),
        skipped_document_ids=omitidos,
        candidate_ids=creados,
        errors=errores,
    )
