import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.router import api_router
from app.core.config import settings, validate_settings_for_production
from app.core.exceptions import HttpError
from app.core.logging import setup_logging
from app.core.middleware import RequestLoggingMiddleware
from app.core.rate_limit import limiter
from app.core.sentry import init_sentry
from app.db.postgres import engine
from app.schemas.common import ErrorResponse

# Configure logging before anything else
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    validate_settings_for_production()
    init_sentry()
    logger.info("Starting Linkpage API...")

    yield

    # Shutdown
    await engine.dispose()
    logger.info("Linkpage API shut down")


app = FastAPI(
    title="Linkpage",
    description="Accounts, profiles and themes for link pages",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.app_debug else None,
    redoc_url="/redoc" if settings.app_debug else None,
)


@app.exception_handler(HttpError)
async def _http_error_handler(request: Request, exc: HttpError):
    return JSONResponse(status_code=exc.status_code, content=ErrorResponse(error=exc.message).model_dump())


def _validation_message(exc: RequestValidationError) -> str:
    error = exc.errors()[0]
    if error["type"] == "json_invalid":
        return "The request body isn't valid JSON."
    field = ".".join(str(part) for part in error["loc"] if part != "body")
    return f"Invalid {field}: {error['msg']}" if field else error["msg"]


# Malformed bodies are client errors like any missing field
@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=ErrorResponse(error=_validation_message(exc)).model_dump())


# Anything that isn't an HttpError is a bug: log it with the traceback
@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled %s on %s %s:\n%s", type(exc).__name__, request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())


# Rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# CORS: parse allowed_origins from settings (comma-separated)
_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


def run() -> None:
    import uvicorn

    uvicorn.run("app.main:app", host=settings.app_host, port=settings.app_port, reload=settings.app_debug)


if __name__ == "__main__":
    run()
