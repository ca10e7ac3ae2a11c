"""
FastAPI application factory
"""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response

from app.config import get_settings
from app.application.errors import (
    ConflictError,
    KanbanError,
    KanbanValidationError,
    NotFoundError,
    TransientError,
)
from app.infrastructure.db.session import Base, check_db_connection, get_engine
from app.api.v1 import auth, boards, columns, tasks

logger = logging.getLogger(__name__)

# Domain error -> HTTP status. Order matters: first isinstance match wins.
ERROR_STATUS = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (KanbanValidationError, 400),
    (TransientError, 503),
)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Last line of defence: log the traceback, answer a bare 500."""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return Response(content="Internal Server Error", status_code=500)


async def kanban_error_handler(request: Request, exc: KanbanError) -> JSONResponse:
    status_code = 500
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code = code
            break

    if status_code >= 500:
        logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
        detail = "service temporarily unavailable"
    else:
        detail = str(exc)
    return JSONResponse(status_code=status_code, content={"detail": detail})


def create_app() -> FastAPI:
    """
    Application factory - builds and wires the FastAPI app

    Returns:
        Configured FastAPI app
    """
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Kanban API",
        debug=settings.DEBUG,
    )

    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY
    )
    app.add_exception_handler(KanbanError, kanban_error_handler)

    app.include_router(auth.router)
    app.include_router(boards.router)
    app.include_router(columns.router)
    app.include_router(tasks.router)

    if settings.AUTO_CREATE_SCHEMA:
        Base.metadata.create_all(get_engine())

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (database reachable)"""
        check_db_connection()
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
