import logging
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .api import admin as admin_api
from .api import auth as auth_api
from .api import job as job_api
from .api import message as message_api
from .api import proposal as proposal_api
from .api import review as review_api
from .api import users as users_api
from .config import DEFAULT_SECRET_KEY, Settings, load_settings
from .database import build_engine, build_session_factory, init_db
from .services.emailer import Mailer, SmtpMailer
from .utils.error_handlers import register_exception_handlers

SERVICE_NAME = "FlowPartner API"
SERVICE_VERSION = "1.0.0"

logger = logging.getLogger(__name__)

_default_origins = ["http://localhost:5173", "http://127.0.0.1:5173"]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None, *, mailer: Mailer | None = None) -> FastAPI:
    """
    Build the API with explicitly constructed handles.

    The engine, session factory and mailer live on `app.state` for the lifetime of
    the process; request dependencies read them from there.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    if settings.is_production and settings.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is not set; using the development default in production")

    app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION)

    engine = build_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.mailer = mailer or SmtpMailer.from_settings(settings)

    app.include_router(auth_api.router)
    app.include_router(users_api.router)
    app.include_router(job_api.router)
    app.include_router(proposal_api.router)
    app.include_router(message_api.router)
    app.include_router(review_api.router)
    app.include_router(admin_api.router)

    register_exception_handlers(app, expose_internals=not settings.is_production)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.get("/")
    def root():
        return {"message": SERVICE_NAME, "version": SERVICE_VERSION, "status": "running"}

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "Backend running", "service": SERVICE_NAME}

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[*_default_origins, *settings.frontend_origins],
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def on_startup() -> None:
        init_db(engine)
        logger.info("%s started (env=%s)", SERVICE_NAME, settings.app_env)

    @app.on_event("shutdown")
    def on_shutdown() -> None:
        engine.dispose()

    return app


def run() -> None:
    """Console entry point: `flowpartner-api`."""
    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
