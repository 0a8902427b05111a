import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException

from corsware.api.routes import health
from corsware.core.config import Settings, get_settings
from corsware.core.errors import default_code_for_status
from corsware.core.logging_config import setup_logging
from corsware.middleware.cors import CORSMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.environment, settings.log_level)
    yield


def _error_body(request: Request, code: str, message: str, details=None) -> dict:
    request_id = getattr(request.state, "request_id", "unknown")
    return {"code": code, "message": message, "details": details, "request_id": request_id}


def create_app(settings: Settings | None = None, cors_options=None) -> FastAPI:
    """Build the API; ``cors_options`` (static or callable) overrides the settings."""
    settings = settings or get_settings()
    app = FastAPI(
        title="corsware",
        description="CORS middleware demo API",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException):
        if isinstance(exc.detail, dict) and "code" in exc.detail and "message" in exc.detail:
            body = _error_body(request, exc.detail["code"], exc.detail["message"], exc.detail.get("details"))
        else:
            message = str(exc.detail) if exc.detail else "Error"
            body = _error_body(request, default_code_for_status(exc.status_code), message)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(Exception)
    async def handle_500(request: Request, exc: Exception):
        logger.exception("Internal server error")
        return JSONResponse(status_code=500, content=_error_body(request, "internal_error", "Internal server error"))

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        started = time.time()
        response = await call_next(request)
        elapsed = time.time() - started
        if elapsed > 0.5:
            logger.info(f"[{request_id}] {request.method} {request.url.path} {elapsed:.2f}s")
        response.headers["X-Request-ID"] = request_id
        return response

    if cors_options is None:
        cors_options = settings.get_cors_options()
    app.add_middleware(CORSMiddleware, options=cors_options)

    app.include_router(health.router)
    return app


app = create_app()
