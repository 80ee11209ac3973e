"""Routers de la API."""
from fastapi import APIRouter, Depends

from app.api.endpoints import candidates, finance, payments, sponsors, students
from app.api.endpoints.auth import get_current_admin
from app.schemas.auth import AdminPrincipal

router = APIRouter()
router.include_router(candidates.router)
router.include_router(students.router)
router.include_router(payments.router)
router.include_router(sponsors.router)
router.include_router(finance.router)


@router.get(
    "/me",
    tags=["api"],
    summary="Administrador actual (protegido)",
    responses={401: {"description": "Token no enviado, inválido o expirado"}},
)
async def get_me(current_admin: AdminPrincipal = Depends(get_current_admin)):
    """Claims del JWT del administrador autenticado."""
    return current_admin


@router.get(
    "/",
    tags=["api"],
    summary="Raíz de la API v1",
    response_description="Mensaje de bienvenida y enlace a la documentación",
)
async def api_root():
    """Información básica de la API y enlace a la documentación Swagger."""
    return {"message": "Mãos Unidas Back Office API v1", "docs": "/docs", "redoc": "/redoc"}
