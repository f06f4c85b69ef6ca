"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import router as api_router
from app.core.config import Settings, get_settings
from app.core.database import create_db_engine, create_session_factory
from app.core.errors import AuthError
from app.core.security import TokenCodec
from app.models import Base
from app.services.auth import LoginPolicy

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Render credential/token/role failures as {detail, code}; 401s advertise Bearer."""
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    logger.info("Auth error: code=%s path=%s", exc.code, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application. The token codec, login policy and DB session factory
    are created here once and stored on app.state; dependencies only read them.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Folio API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    if settings.DATABASE_AUTO_CREATE:
        Base.metadata.create_all(bind=engine)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_codec = TokenCodec.from_settings(settings)
    app.state.login_policy = LoginPolicy(admin_only=settings.AUTH_ADMIN_ONLY_LOGIN)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AuthError, auth_error_handler)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Folio API"}

    logger.info(
        "Folio API configured: env=%s admin_only_login=%s token_lifetime_min=%s",
        settings.APP_ENV,
        settings.AUTH_ADMIN_ONLY_LOGIN,
        settings.JWT_EXPIRE_MINUTES,
    )
    return app


# Fails at import when JWT_SECRET is unset; there is no fallback secret.
app = create_app()
