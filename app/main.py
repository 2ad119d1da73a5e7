# app/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, the centralised error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.routers import auth, users, vehicles, slots, requests, logs, health
from app.database import create_tables
from app.config import settings
from app.exceptions import HttpException
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Parking Slot Management API",
    description="Users, vehicles, parking slots and slot-assignment requests with JWT auth.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGIN_LIST,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Authorization"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Error Handlers: every error body is {status, message, errors} ───────────
def _error(status_code: int, message: str, errors=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": status_code, "message": message, "errors": jsonable_encoder(errors)},
    )


@app.exception_handler(HttpException)
async def http_exception_handler(request: Request, exc: HttpException):
    if exc.status >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} → {exc.status} {exc.message}")
    return _error(exc.status, exc.message, exc.errors)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error(status.HTTP_400_BAD_REQUEST, "Validation error", exc.errors())


@app.exception_handler(StarletteHTTPException)
async def starlette_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,     tags=["Auth"])
app.include_router(users.router,    tags=["Users"])
app.include_router(vehicles.router, tags=["Vehicles"])
app.include_router(slots.router,    prefix="/parking", tags=["Parking Slots"])
app.include_router(requests.router, prefix="/parking", tags=["Slot Requests"])
app.include_router(logs.router,     tags=["Action Logs"])
app.include_router(health.router,   tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Parking backend starting up...")
    create_tables()
    logger.info("Database tables ready")
    logger.info(f"Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("API docs at /docs")
    if settings.JWT_SECRET == "CHANGE_ME":
        logger.warning("JWT_SECRET is the default value, set it in .env before deploying")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Parking backend shutting down...")
