"""Punto de entrada de la aplicación FastAPI."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from app.api import router as api_router
from app.core.config import settings
from app.core.database import init_db
from app.core.exceptions import (
    EmailRelayError,
    EntityNotFoundError,
    SponsorRemovalNotConfirmedError,
    SponsorRequiredError,
    StorageError,
)
from app.models import *  # noqa: F401, F403 - Registra modelos en Base.metadata antes de init_db

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Documentación Swagger: disponible en /docs (OpenAPI 3.0)
OPENAPI_TAGS = [
    {
        "name": "api",
        "description": "Endpoints generales de la API v1.",
    },
    {
        "name": "candidatos",
        "description": "Solicitudes de beca: alta, edición, aprobación con padrino, fotos e importación desde Excel.",
    },
    {
        "name": "estudiantes",
        "description": "Estudiantes matriculados (MAT-NNN): edición, fotos y recordatorios de pago al padrino.",
    },
    {
        "name": "pagos",
        "description": "Pagos de cada estudiante y comprobantes. Cada movimiento recalcula la condición de pago.",
    },
    {
        "name": "padrinos",
        "description": "Padrinos: listado, búsqueda y edición.",
    },
    {
        "name": "finanzas",
        "description": "Resumen financiero de los estudiantes activos con padrino.",
    },
    {
        "name": "salud",
        "description": "Comprobación del estado del servicio.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestiona el ciclo de vida: inicio y cierre de la aplicación."""
    await init_db()
    logger.info("%s iniciada", settings.app_name)
    yield


app = FastAPI(
    title=settings.app_name,
    description="""
API REST del **back office de Mãos Unidas**: candidatos, padrinos, estudiantes y pagos.

## Autenticación (evitar 401)

Todas las rutas salvo `/health` y `GET /api/v1/candidates/public` exigen el header
`Authorization: Bearer <token>` con el JWT emitido por el proveedor de autenticación.
En Swagger UI use el botón **Authorize** y pegue solo el token.
""",
    version="0.1.0",
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    swagger_ui_parameters={"persistAuthorization": True, "tryItOutEnabled": True},
)

# CORS: permitir acceso desde cualquier origen (frontend en otro puerto/dominio)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EntityNotFoundError)
async def entity_not_found_handler(request: Request, exc: EntityNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(SponsorRequiredError)
async def sponsor_required_handler(request: Request, exc: SponsorRequiredError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "code": "sponsor_required", "candidateId": exc.candidate_id},
    )


@app.exception_handler(SponsorRemovalNotConfirmedError)
async def sponsor_removal_handler(request: Request, exc: SponsorRemovalNotConfirmedError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": str(exc),
            "code": "sponsor_removal_not_confirmed",
            "candidateId": exc.candidate_id,
            "sponsorId": exc.sponsor_id,
        },
    )


@app.exception_handler(EmailRelayError)
async def email_relay_handler(request: Request, exc: EmailRelayError):
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": exc.message})


@app.exception_handler(StorageError)
async def storage_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Error de base de datos en %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Error al acceder a la base de datos. Intente nuevamente."},
    )


app.include_router(api_router, prefix="/api/v1")

# Fotos y comprobantes guardados por LocalBlobStore
app.mount(
    settings.storage_base_url,
    StaticFiles(directory=settings.storage_dir, check_dir=False),
    name="files",
)


@app.get(
    "/health",
    tags=["salud"],
    summary="Estado del servicio",
    response_description="Indica que la API está en ejecución",
)
async def health_check():
    """Comprueba que el servicio está activo. No requiere autenticación."""
    return {"status": "ok", "message": "Servicio en ejecución"}
