"""
Alumni Records Service - Main Application

FastAPI backend with:
- PostgreSQL or MongoDB as the record store (STORAGE_BACKEND)
- JWT authentication with admin / user roles
- Recoverable trash for job records
- Photo and certificate uploads on local disk

Run: uvicorn app.main:app --reload
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.api.deps import get_repositories
from app.api.routes import api_router
from app.core.config import get_settings
from app.core.exceptions import AppError
from app.core.auth import dummy_password_hash
from app.core.logging_config import request_id_var, setup_logging
from app.repositories import Repositories

settings = get_settings()
setup_logging(settings.log_level, settings.json_logs)

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    401: "unauthenticated",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to the record store on startup so the schema exists before the first request."""
    logger.info("Starting up Alumni Records API (backend=%s)...", settings.storage_backend)
    dummy_password_hash()
    provider = app.dependency_overrides.get(get_repositories, get_repositories)
    try:
        repos = provider()
        logger.info("Record store ready (%s)", repos.backend)
    except AppError as exc:
        # get_repositories is not cached on failure; the next request retries
        logger.error("Record store not ready at startup: %s", exc.message)
    yield
    logger.info("Shutting down Alumni Records API...")


app = FastAPI(
    title="Alumni Records API",
    description="""
    Alumni profiles and their employment history.

    ## Features
    - **Authentication**: JWT login, admin and user roles
    - **Alumni**: Profile management, self-registration for users
    - **Job records**: CRUD with search, sort and pagination
    - **Trash**: Soft delete, restore and permanent delete for owners and admins
    - **Files**: Photo and certificate uploads
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    token = request_id_var.set(request_id)
    start = time.perf_counter()
    try:
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s -> %d (%.1fms)", request.method, request.url.path, response.status_code, duration_ms)
    finally:
        request_id_var.reset(token)
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================
# ERROR ENVELOPES
# ============================================================

def error_response(status_code: int, message: str, error: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": error},
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return error_response(exc.status_code, exc.message, exc.to_error())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return error_response(400, "Validation failed", {"code": "validation_error", "details": jsonable_encoder(errors)})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = HTTP_ERROR_CODES.get(exc.status_code, "http_error")
    return error_response(exc.status_code, str(exc.detail), {"code": code})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error", {"code": "internal_error"})


# ============================================================
# ROUTES
# ============================================================

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/", tags=["Health"])
def index():
    """Service index."""
    return {
        "success": True,
        "message": "Alumni Records API",
        "data": {
            "version": __version__,
            "docs": "/docs",
            "api_prefix": settings.api_prefix,
        },
    }


@app.get("/health", tags=["Health"])
def health_check(repos: Repositories = Depends(get_repositories)):
    """Store connectivity check."""
    connected = repos.ping()
    body = {
        "success": connected,
        "message": "healthy" if connected else "store unreachable",
        "data": {"backend": repos.backend, "store": "connected" if connected else "disconnected"},
    }
    return JSONResponse(status_code=200 if connected else 503, content=body)
