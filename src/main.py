"""
Main FastAPI application.
"""

from dotenv import load_dotenv

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.openapi.docs import get_redoc_html
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.di.container import Container
from .core.utils import configure_logging, get_logger
from .core.observability import SERVICE_VERSION_VALUE, setup_observability
from .core.api.exception_handlers import setup_exception_handlers
from .modules.entitlements.api import router as entitlements_router

configure_logging()
logger = get_logger(__name__)

# Initialize DI Container
container = Container()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("app_starting", host=settings.api.host, port=settings.api.port, backend=settings.database.backend)

    yield

    if settings.database.backend == "postgres":
        container.core.postgres_db().close()
    logger.info("app_stopped")


is_production = settings.api.environment == "production"

app = FastAPI(
    title="SyncStyle Entitlements API",
    description="Premium feature gating, usage limits and Stripe subscription sync",
    version=SERVICE_VERSION_VALUE,
    lifespan=lifespan,
    debug=settings.api.debug,
    docs_url=None if is_production else "/docs",
    redoc_url=None,
    openapi_url=None if is_production else "/openapi.json",
)

setup_observability(app)

setup_exception_handlers(app)

app.container = container

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(entitlements_router.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"name": "SyncStyle Entitlements API", "version": SERVICE_VERSION_VALUE, "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "syncstyle-entitlements"}


if not is_production:
    @app.get("/redoc", include_in_schema=False)
    async def redoc_html():
        """Redoc documentation."""
        return get_redoc_html(
            openapi_url=app.openapi_url,
            title=app.title + " - ReDoc",
            redoc_js_url="https://unpkg.com/redoc@latest/bundles/redoc.standalone.js",
        )


if __name__ == "__main__":
    load_dotenv()
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
