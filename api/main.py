import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import router as auth_router
from auth import security
from core.db import Database
from core.errors import ApiError, StorageError
from core.settings import Settings
from detections import router as detections_router
from devices import router as devices_router
from events import router as events_router
from observations import router as observations_router
from questionnaires import router as questionnaires_router

logger = logging.getLogger(__name__)


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if isinstance(exc, StorageError):
        # The cause chain holds the driver error; it stays in the server log.
        logger.error(
            "storage_error method=%s path=%s message=%s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _request_validation_handler(_: Request, __: RequestValidationError) -> JSONResponse:
    # Only raised for bodies that are not JSON at all; shapes are checked per endpoint.
    return JSONResponse(status_code=400, content={"error": "Invalid input"})


async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def create_app(
    settings: Settings | None = None,
    *,
    database: Database | None = None,
    tokens: security.TokenService | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Connect the DB pool once per process, before the first request.
        await app.state.database.connect()
        try:
            yield
        finally:
            await app.state.database.close()

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.tokens = tokens or security.TokenService.from_settings(settings)

    # Sensors and the mobile app call from anywhere; auth is the bearer token.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(events_router.router, tags=["events"])
    app.include_router(detections_router.router, tags=["detections"])
    app.include_router(devices_router.router, tags=["devices"])
    app.include_router(observations_router.router, tags=["observations"])
    app.include_router(questionnaires_router.router, tags=["questionnaires"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"ok": True, "service": settings.service_name}

    return app


app = create_app()
