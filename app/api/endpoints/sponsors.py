"""Endpoints de padrinos."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_admin
from app.core.database import get_db
from app.schemas.auth import AdminPrincipal
from app.schemas.sponsor import SponsorCreate, SponsorListResponse, SponsorRead, SponsorUpdate
from app.services.sponsor_service import SponsorRegistry

router = APIRouter(prefix="/sponsors", tags=["padrinos"])


@router.get(
    "",
    response_model=SponsorListResponse,
    summary="Listar o buscar padrinos",
    description=(
        "Sin 'search' lista todos por apellido y nombre. Con 'search' busca sin distinguir "
        "mayúsculas en nombre, apellido o nombre completo (vacío devuelve lista vacía)."
    ),
)
async def listar_padrinos(
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
    search: Annotated[str | None, Query(description="Texto a buscar")] = None,
):
    registro = SponsorRegistry(db)
    padrinos = await registro.list() if search is None else await registro.search(search)
    return SponsorListResponse(sponsors=padrinos)


@router.get(
    "/by-candidate/{candidate_id}",
    response_model=SponsorListResponse,
    summary="Padrinos por candidato (campo heredado candidateIds)",
)
async def padrinos_por_candidato(
    candidate_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    return SponsorListResponse(sponsors=await SponsorRegistry(db).list_by_candidate_ids(candidate_id))


@router.get("/{sponsor_id}", response_model=SponsorRead, summary="Obtener padrino")
async def obtener_padrino(
    sponsor_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    padrino = await SponsorRegistry(db).get_by_id(sponsor_id)
    if not padrino:
        raise HTTPException(status_code=404, detail="Padrino no encontrado")
    return padrino


@router.post(
    "",
    response_model=SponsorRead,
    status_code=status.HTTP_201_CREATED,
    summary="Crear padrino",
)
async def crear_padrino(
    body: SponsorCreate,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    return await SponsorRegistry(db).create(body.model_dump())


@router.patch(
    "/{sponsor_id}",
    response_model=SponsorRead,
    summary="Actualizar padrino",
    description="Las copias del padrino guardadas en estudiantes no se actualizan.",
)
async def actualizar_padrino(
    sponsor_id: str,
    body: SponsorUpdate,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    padrino = await SponsorRegistry(db).update(sponsor_id, body.to_partial())
    if not padrino:
        raise HTTPException(status_code=404, detail="Padrino no encontrado")
    return padrino


@router.delete(
    "/{sponsor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar padrino",
)
async def eliminar_padrino(
    sponsor_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    if not await SponsorRegistry(db).delete(sponsor_id):
        raise HTTPException(status_code=404, detail="Padrino no encontrado")
