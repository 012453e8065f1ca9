import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import ALLOWED_ORIGINS
from .database import Database
from .domain.bookings.router import router as bookings_router
from .domain.catalog.router import router as catalog_router
from .domain.coupons.router import router as coupons_router
from .domain.dashboard.router import router as dashboard_router
from .domain.decorators.router import router as decorators_router
from .domain.payments.router import router as payments_router
from .domain.users.router import router as users_router
from .errors import register_exception_handlers
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the API. A ``Database`` may be injected (tests); otherwise one is
    created from ``DATABASE_URL`` at start-up and disposed at shut-down.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting up...")
        owns_database = database is None
        db_handle = database or Database()
        try:
            db_handle.init()
        except Exception as e:
            error_msg = str(e)
            # Another worker may have created the tables concurrently
            if "already exists" in error_msg or "duplicate key" in error_msg:
                logger.info("Database tables already exist (created by another worker)")
            else:
                logger.error(f"Failed to create database tables: {e}")
                raise
        app.state.database = db_handle

        yield

        logger.info("Application shutting down...")
        if owns_database:
            db_handle.dispose()

    app = FastAPI(title="LuxePlan API", version="1.0.0", lifespan=lifespan)
    if database is not None:
        app.state.database = database

    register_exception_handlers(app)

    if SECURITY_HEADERS_ENABLED:
        app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"])
    else:
        logger.warning("Security headers DISABLED - only use in development!")

    logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(users_router)
    app.include_router(catalog_router)
    app.include_router(decorators_router)
    app.include_router(bookings_router)
    app.include_router(payments_router)
    app.include_router(coupons_router)
    app.include_router(dashboard_router)

    @app.get("/")
    def root():
        return {"message": "LuxePlan API is running"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("luxeplan.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
