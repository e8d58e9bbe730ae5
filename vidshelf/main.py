from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from loguru import logger

from vidshelf.core.config import AppSettings
from vidshelf.core.errors import VideoServiceError
from vidshelf.api import api_router
from vidshelf.db.database import dispose_engine, init_models


def get_app_settings() -> AppSettings:
    try:
        return AppSettings()
    except Exception as e:
        logger.error(f"Error loading settings: {e}")
        raise

def setup_logging(settings: AppSettings):
    logger.add(
        settings.log_file,
        rotation=settings.log_rotation,
        compression=settings.log_compression.value,
        format=settings.log_format,
        level=settings.app_log_level.value.upper(),
    )

async def video_service_error_handler(request: Request, exc: VideoServiceError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

def create_app(settings: AppSettings = None):
    settings = settings or get_app_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_tables:
            await init_models()
        logger.info(f"{settings.app_name} started")
        yield
        await dispose_engine()
        logger.info(f"{settings.app_name} stopped")

    app = FastAPI(
        title=settings.app_name,
        description="Video upload and ranking API",
        version="1.0.0",
        lifespan=lifespan,
    )
    setup_logging(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(VideoServiceError, video_service_error_handler)

    @app.get("/")
    def read_root():
        return {"message": "Video upload service running"}
    @app.get("/health")
    async def health_check():
        return {"status": "ok"}
    app.include_router(api_router)

    return app

app = create_app()

if __name__ == "__main__":
    settings = get_app_settings()
    uvicorn.run(
        "vidshelf.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_reload,
    )
