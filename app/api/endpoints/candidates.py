"""Endpoints de candidatos (solicitudes de beca)."""
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_admin
from app.core.database import get_db
from app.schemas.auth import AdminPrincipal
from app.schemas.candidate import (
    CandidateApprovalRequest,
    CandidateCreate,
    CandidateImportResponse,
    CandidateListResponse,
    CandidatePublicListResponse,
    CandidateRead,
    CandidateUpdate,
    CandidateWriteResponse,
)
from app.schemas.sync import SyncResult
from app.services.candidate_import import import_candidates
from app.services.candidate_service import CandidateRegistry
from app.services.storage_service import LocalBlobStore
from app.services.sync_service import LifecycleSynchronizer

router = APIRouter(prefix="/candidates", tags=["candidatos"])


def _write_response(candidato, resultado: SyncResult) -> CandidateWriteResponse:
    return CandidateWriteResponse(
        candidate=CandidateRead.model_validate(candidato),
        sync=resultado,
        warning=resultado.warning,
    )


@router.get(
    "",
    response_model=CandidateListResponse,
    summary="Listar candidatos",
    description="Candidatos ordenados por fecha de creación (más recientes primero). Filtros opcionales por estado o período.",
)
async def listar_candidatos(
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
    estado: Annotated[str | None, Query(alias="status", description="pending, active, rejected o archived")] = None,
    periodo: Annotated[str | None, Query(alias="period", description="Período de la solicitud")] = None,
):
    registro = CandidateRegistry(db)
    if estado:
        candidatos = await registro.list_by_status(estado)
    elif periodo:
        candidatos = await registro.list_by_period(periodo)
    else:
        candidatos = await registro.list()
    return CandidateListResponse(candidates=candidatos)


@router.get(
    "/public",
    response_model=CandidatePublicListResponse,
    summary="Candidatos pendientes (público)",
    description="Candidatos pendientes sin datos sensibles. No requiere autenticación.",
)
async def listar_candidatos_publicos(db: AsyncSession = Depends(get_db)):
    return CandidatePublicListResponse(candidates=await CandidateRegistry(db).list_public())


@router.post(
    "/import",
    response_model=CandidateImportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Importar candidatos desde Excel",
    description="Sube un .xlsx con columnas documentId y firstName/lastName (o fullName). Crea candidatos pendientes.",
)
async def importar_candidatos(
    archivo: UploadFile = File(..., description="Archivo Excel (.xlsx)"),
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    nombre_archivo = archivo.filename or "sin_nombre"
    if not nombre_archivo.lower().endswith(".xlsx"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El archivo debe tener extensión .xlsx",
        )
    contenido = await archivo.read()
    try:
        return await import_candidates(db, contenido)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{candidate_id}", response_model=CandidateRead, summary="Obtener candidato")
async def obtener_candidato(
    candidate_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    candidato = await CandidateRegistry(db).get_by_id(candidate_id)
    if not candidato:
        raise HTTPException(status_code=404, detail="Candidato no encontrado")
    return candidato


@router.post(
    "",
    response_model=CandidateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Crear candidato",
)
async def crear_candidato(
    body: CandidateCreate,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    return await CandidateRegistry(db).create(body.model_dump(exclude_none=True))


@router.patch(
    "/{candidate_id}",
    response_model=CandidateWriteResponse,
    summary="Actualizar candidato",
    description=(
        "Edición parcial con sincronización del estudiante vinculado. "
        "Aprobar (pending -> active) sin padrino responde 409: use POST /candidates/{id}/approve. "
        "Sacar de 'active' a un candidato con padrino exige confirmSponsorRemoval=true."
    ),
    responses={
        404: {"description": "Candidato no encontrado"},
        409: {"description": "Falta padrino o confirmación para desvincularlo"},
    },
)
async def actualizar_candidato(
    candidate_id: str,
    body: CandidateUpdate,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
    confirmar: Annotated[
        bool, Query(alias="confirmSponsorRemoval", description="Confirma desvincular al padrino")
    ] = False,
):
    candidato, resultado = await LifecycleSynchronizer(db).update_candidate(
        candidate_id, body.to_partial(), confirm_sponsor_removal=confirmar
    )
    return _write_response(candidato, resultado)


@router.post(
    "/{candidate_id}/approve",
    response_model=CandidateWriteResponse,
    summary="Aprobar candidato con padrino",
    description="Asigna un padrino existente (sponsorId) o crea uno nuevo (sponsor), activa al candidato y crea su estudiante.",
)
async def aprobar_candidato(
    candidate_id: str,
    body: CandidateApprovalRequest,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    nuevo = body.sponsor.model_dump() if body.sponsor else None
    candidato, resultado = await LifecycleSynchronizer(db).approve_candidate(
        candidate_id, sponsor_id=body.sponsor_id, new_sponsor=nuevo
    )
    return _write_response(candidato, resultado)


@router.delete(
    "/{candidate_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar candidato",
)
async def eliminar_candidato(
    candidate_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    if not await CandidateRegistry(db).delete(candidate_id):
        raise HTTPException(status_code=404, detail="Candidato no encontrado")


@router.post(
    "/{candidate_id}/photo",
    response_model=CandidateWriteResponse,
    summary="Subir foto del candidato",
    description="Imagen de hasta 5 MB. Se guarda en candidates/{id}/profile.{ext}.",
)
async def subir_foto_candidato(
    candidate_id: str,
    archivo: UploadFile = File(..., description="Imagen (jpg, png, gif o webp)"),
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    if await CandidateRegistry(db).get_by_id(candidate_id) is None:
        raise HTTPException(status_code=404, detail="Candidato no encontrado")
    url, path = LocalBlobStore().upload_profile_photo(
        "candidates", candidate_id, archivo.filename, archivo.content_type, await archivo.read()
    )
    candidato, resultado = await LifecycleSynchronizer(db).update_candidate(
        candidate_id, {"photo_url": url, "photo_path": path}
    )
    return _write_response(candidato, resultado)
