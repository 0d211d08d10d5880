from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .database import engine, Base, AsyncSessionLocal
from .dependencies import build_http_client
from .exceptions import MCPGatewayError
from .logging_config import configure_logging
from .registry import router as registry_router
from .registry.exceptions import TenantNotFoundError
from .registry.models import Tenant, Credential, ApiDefinition  # noqa: F401 - Import so Base.metadata sees them
from .registry.service import sync_tenants_from_config
from .gateway import router as gateway_router
from .gateway.exceptions import ToolNotFoundError
from .mcp_transport.router import router as mcp_router

settings = get_settings()
logger = structlog.get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)

    # Startup: Create tables (alembic owns real migrations)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        created = await sync_tenants_from_config(session, settings.TENANT_SEED_PATH)
    logger.info("tenants_synced", created=created)

    app.state.http_client = build_http_client(settings)

    yield

    # Shutdown: Close database connection and HTTP client
    await app.state.http_client.aclose()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    debug=settings.DEBUG
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TenantNotFoundError)
async def tenant_not_found_handler(request: Request, exc: TenantNotFoundError):
    return JSONResponse(
        status_code=404,
        content={"error": exc.code, "message": exc.message}
    )


@app.exception_handler(ToolNotFoundError)
async def tool_not_found_handler(request: Request, exc: ToolNotFoundError):
    return JSONResponse(
        status_code=404,
        content={"error": exc.code, "message": exc.message}
    )


@app.exception_handler(MCPGatewayError)
async def gateway_exception_handler(request: Request, exc: MCPGatewayError):
    logger.error("unhandled_gateway_error", error=exc.code, message=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": exc.code, "message": exc.message}
    )


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# Include routers
app.include_router(registry_router)
app.include_router(gateway_router)
app.include_router(mcp_router)
