# app/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, domain error handlers, all routers,
static photo serving, and the startup routine (tables, default admins, cleanup jobs).
"""

import os
import time

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.database import SessionLocal, create_tables
from app.exceptions import AppError, InvalidCredentials
from app.routers import auth, entries, health
from app.services.auth_service import seed_default_users
from app.services.cleanup_scheduler import CleanupScheduler
from app.utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="Vehicle Entry Log API",
    description="Visitor and vehicle entry/exit register with tiered admin retention.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

cleanup_scheduler = CleanupScheduler()

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, InvalidCredentials) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,    prefix=settings.API_PREFIX, tags=["Auth"])
app.include_router(entries.router, prefix=settings.API_PREFIX, tags=["Entries"])
app.include_router(health.router,  prefix=settings.API_PREFIX, tags=["Health"])

# ── Uploaded photos ──────────────────────────────────────────────────────────
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Vehicle Entry Log starting up...")
    create_tables()
    logger.info("✅ Database tables ready")

    if settings.SEED_DEFAULT_USERS:
        db = SessionLocal()
        try:
            for username in seed_default_users(db):
                logger.info(f"👤 Default user created: {username}")
        finally:
            db.close()

    if settings.CLEANUP_SCHEDULER_ENABLED:
        cleanup_scheduler.start()

    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Vehicle Entry Log shutting down...")
    cleanup_scheduler.stop()
