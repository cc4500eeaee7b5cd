"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (schema, Redis, engine).
Middleware, CORS, exception handlers, and routers all registered here.

Every error leaves the API in the same envelope:

    {"error": {"code": "...", "message": "..."}}

TeamDeskError subclasses carry their own status and code. Anything
unexpected is logged with its traceback and answered with a generic
internal_error, so internals never reach the client.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from teamdesk import __version__
from teamdesk.api import api_router
from teamdesk.config import settings
from teamdesk.errors import InternalError, TeamDeskError, ValidationError
from teamdesk.logging_config import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "teamdesk.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from teamdesk.db.engine import create_schema, engine

    if settings.auto_create_schema:
        await create_schema()
        logger.info("teamdesk.schema_ready")

    from teamdesk.redis_client import close_redis, init_redis
    try:
        await init_redis()
        logger.info("teamdesk.redis_connected", url=settings.redis_url)
    except Exception as e:
        # Redis is optional — only rate limiting depends on it
        logger.warning("teamdesk.redis_unavailable", error=str(e))

    yield

    logger.info("teamdesk.shutdown")
    await close_redis()
    await engine.dispose()


# ── Exception handlers ───────────────────────────────────


async def teamdesk_error_handler(request: Request, exc: TeamDeskError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies are client errors: 400 validation_error.

    Learn: exc.errors() may hold exception objects in "ctx", which aren't
    JSON-serializable, so only location and message are passed on.
    """
    err = ValidationError()
    body = err.to_dict()
    body["error"]["fields"] = [
        {
            "field": ".".join(str(p) for p in e.get("loc", ())[1:]),
            "message": e.get("msg", ""),
        }
        for e in exc.errors()
    ]
    return JSONResponse(status_code=err.status_code, content=body)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework-raised errors (unknown route, wrong method) in the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": f"http_{exc.status_code}", "message": str(exc.detail)}},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for failures above RequestIdMiddleware in the stack."""
    logger.exception(
        "teamdesk.unhandled_error", method=request.method, path=request.url.path
    )
    err = InternalError()
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="TeamDesk",
        description="Team-shared tasks, projects, and leads",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from teamdesk.middleware.rate_limit import RateLimitMiddleware
    from teamdesk.middleware.request_id import RequestIdMiddleware
    from teamdesk.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TeamDeskError, teamdesk_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: teamdesk.main:app)
app = create_app()
