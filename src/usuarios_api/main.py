import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .config import settings, setup_logging
from .coordinator import UserWriteCoordinator
from .database import create_engine, create_session_factory, ping
from .errors import BadRequestError, StoreError, UploadError
from .media import MediaUploader
from .routes.usuarios import router as usuarios_router
from .store import UserStore

setup_logging()
logger = logging.getLogger(__name__)

UPLOAD_FAILED_MESSAGE = "Error al subir la imagen"


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = create_engine(
        settings.sqlalchemy_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        connect_timeout=settings.store_timeout_seconds,
    )
    if await ping(engine):
        logger.info("Connected to database %s", engine.url.render_as_string())
    else:
        # Requests will report the store error themselves; keep serving.
        logger.error("Could not connect to database %s", engine.url.render_as_string())

    http_client = httpx.AsyncClient(timeout=settings.upload_timeout_seconds)
    store = UserStore(
        create_session_factory(engine), timeout=settings.store_timeout_seconds
    )
    uploader = MediaUploader(
        http_client,
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        folder=settings.cloudinary_folder,
        upload_url=settings.cloudinary_upload_url,
        timeout=settings.upload_timeout_seconds,
    )

    app.state.engine = engine
    app.state.coordinator = UserWriteCoordinator(store, uploader)
    yield
    await http_client.aclose()
    await engine.dispose()
    logger.info("Usuarios API shut down")


def create_app() -> FastAPI:
    app = FastAPI(title="Usuarios API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(usuarios_router)

    @app.exception_handler(UploadError)
    async def upload_error_handler(request: Request, exc: UploadError):
        return JSONResponse(status_code=500, content={"error": UPLOAD_FAILED_MESSAGE})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(BadRequestError)
    async def bad_request_handler(request: Request, exc: BadRequestError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Servidor funcionando..."

    @app.get("/health")
    async def health():
        engine = getattr(app.state, "engine", None)
        db_status = "disconnected"
        if engine is not None and await ping(engine):
            db_status = "connected"
        return {
            "status": "ok" if db_status == "connected" else "degraded",
            "database": db_status,
        }

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve on ``HOST``:``PORT`` (3000 by default)."""
    logger.info("Starting server on port %d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
