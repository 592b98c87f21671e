from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .app.api import public
from .app.api.errors import setup_exception_handlers
from .app.core.config import Settings, get_settings
from .app.core.dependencies import get_settings_dependency
from .app.core.logger import configure_logging
from .app.schemas import RootResponse

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    logger.info(f"Starting {settings.APP_NAME} on port {settings.PORT}...")
    logger.info(f"Cloudinary configured: {settings.cloudinary_configured}")
    if not settings.storage_credentials.is_configured:
        logger.warning(
            "Cloudinary credentials are incomplete; uploads and deletions will fail"
        )
    logger.info(f"Health check: http://localhost:{settings.PORT}/api/health")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")


def create_app(settings: Settings = settings) -> FastAPI:
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app, settings)

    @app.get("/", response_model=RootResponse)
    async def root(settings: Settings = Depends(get_settings_dependency)):
        """Liveness message."""
        return RootResponse(
            message="Backend ImageHost actif ✅",
            timestamp=datetime.now(timezone.utc),
            cloudinary=settings.cloudinary_configured,
        )

    app.include_router(public.router, prefix="/api", tags=["public"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.image_host_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
    )
