import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from comanda_digital.api.v1.router import api_router_v1
from comanda_digital.core.config import settings
from comanda_digital.core.exceptions import AppError
from comanda_digital.core.logging import setup_logging
from comanda_digital.database import engine, get_db
from comanda_digital.db import models  # noqa: F401  registra todas as tabelas no metadata
from comanda_digital.db.base_class import Base
from comanda_digital.services.redis_service import shutdown_redis_client, startup_redis_client

# Configuração básica de logging
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API de comanda digital - mesas com QR Code, sessões, carrinho, cozinha, divisão de conta e pagamento",
    openapi_url=f"{settings.API_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    contact={
        "name": "Suporte Técnico",
        "email": settings.SUPPORT_EMAIL,
    },
    license_info={
        "name": "MIT",
    },
)

# Configuração de CORS
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Erro na requisição"
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", [])[1:])
    message = f"Dados inválidos: {field} - {first.get('msg')}" if field else "Dados inválidos"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(StaleDataError)
async def stale_data_handler(request: Request, exc: StaleDataError):
    logger.warning(f"{request.method} {request.url.path}: conflito de versão ({exc})")
    return error_response(status.HTTP_409_CONFLICT, "Registro alterado por outra operação; tente novamente")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"{request.method} {request.url.path}: erro de banco de dados", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro de banco de dados")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path}: erro inesperado", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro interno do servidor")


@app.on_event("startup")
async def on_startup():
    # Em produção, use migrações com Alembic
    if settings.ENVIRONMENT == "development":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Tabelas criadas com sucesso (apenas em desenvolvimento)")
    await startup_redis_client()


@app.on_event("shutdown")
async def on_shutdown():
    await shutdown_redis_client()


# Inclui todas as rotas da API
app.include_router(api_router_v1, prefix=settings.API_STR)


@app.get("/", tags=["Root"])
async def read_root():
    return {
        "message": f"Bem-vindo à API {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}",
        "docs": "/docs",
        "status": "operacional",
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health", tags=["Health Check"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """Endpoint para verificação de saúde da API"""
    try:
        await db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.warning(f"Health check: banco indisponível ({e})")
        database = "disconnected"
    return {
        "success": database == "connected",
        "status": "healthy" if database == "connected" else "degraded",
        "database": database,
        "redis": "enabled" if settings.REDIS_ENABLED else "disabled",
        "environment": settings.ENVIRONMENT,
    }
