"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from estate_backend.core.config import settings
from estate_backend.core.middleware import setup_middleware
from estate_backend.core.exceptions import PlatformError

from estate_backend.api.auth import router as auth_router
from estate_backend.api.roles import router as roles_router
from estate_backend.api.admin import router as admin_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("estate_platform")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting %s", settings.APP_NAME)
    try:
        from estate_backend.db.session import SessionLocal, init_db
        from estate_backend.db.seeds.seed_roles import seed_roles

        init_db()
        db = SessionLocal()
        try:
            seed_roles(db)
        finally:
            db.close()
    except Exception as e:
        logger.warning("Could not seed system roles: %s", e)

    yield

    logger.info("Shutting down %s", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    description="Real-estate marketplace API — authentication and role management",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware
setup_middleware(app)


@app.exception_handler(PlatformError)
async def platform_exception_handler(request: Request, exc: PlatformError):
    """Render domain errors as {success, reason, message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "reason": exc.reason, "message": exc.message},
    )

# Register routers
app.include_router(auth_router, prefix="/api")
app.include_router(roles_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/api/health")
async def health():
    """Quick health check endpoint."""
    return {"status": "ok"}
