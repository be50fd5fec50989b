# codehire/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from codehire.core.auth import SessionIssuer
from codehire.core.config import Settings, get_settings
from codehire.core.email_client import EmailClient
from codehire.core.errors import GENERIC_ERROR_MESSAGE
from codehire.core.llm_client import AnalysisProvider, GroqAnalysisProvider
from codehire.database import Database

# Routers
from codehire.routers.activity import router as activity_router
from codehire.routers.analysis import router as analysis_router
from codehire.routers.auth import router as auth_router
from codehire.routers.profile import router as profile_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


def _error_body(message: str, errors: dict[str, str] | None = None) -> dict:
    body: dict = {"error": message}
    if errors:
        body["errors"] = errors
    return body


def _install_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Render every failure as {"error": ..., "errors"?: {...}}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail), getattr(exc, "errors", None)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors: dict[str, str] = {}
        for err in exc.errors():
            # loc looks like ("body", "email"); a bare ("body",) means bad JSON
            loc = [str(part) for part in err.get("loc", ()) if part != "body"]
            errors[".".join(loc) or "body"] = err.get("msg", "Invalid value")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(_error_body("Please fix the errors below", errors)),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = GENERIC_ERROR_MESSAGE if settings.is_production else (str(exc) or GENERIC_ERROR_MESSAGE)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(message),
        )


def create_app(
    settings: Settings | None = None,
    *,
    database: Database | None = None,
    email_client: EmailClient | None = None,
    analysis_provider: AnalysisProvider | None = None,
) -> FastAPI:
    """
    Build the application and its process-wide collaborators.

    Collaborators are attached to `app.state` and reach handlers through
    dependencies, so tests can pass fakes for any of them.

    Startup fails if JWT_SECRET is missing (Settings validation).
    """
    settings = settings or get_settings()
    database = database or Database(settings.DATABASE_URL, require_ssl=settings.DATABASE_REQUIRE_SSL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Startup:
          - Verify DB connectivity and create tables.

        Shutdown:
          - Dispose of the connection pool.
        """
        logger.info("🔄 Startup: Connecting to database...")
        try:
            database.create_all()
            logger.info("✅ Startup: DB connection OK, tables verified.")
        except Exception as e:
            logger.error(f"❌ Startup: DB connection FAILED: {e}")
            raise
        yield
        database.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = database
    app.state.session_issuer = SessionIssuer.from_settings(settings)
    app.state.email_client = email_client or EmailClient(settings)
    app.state.analysis_provider = analysis_provider or GroqAnalysisProvider.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _install_error_handlers(app, settings)

    app.include_router(auth_router, prefix=settings.API_PREFIX)
    app.include_router(activity_router, prefix=settings.API_PREFIX)
    app.include_router(profile_router, prefix=settings.API_PREFIX)
    app.include_router(analysis_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "codehire-backend"}

    return app


app = create_app()
