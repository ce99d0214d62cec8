import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from yeartrace.db.base import SessionLocal, get_db, init_db
from yeartrace.core.config import settings
from yeartrace.core.deps import get_plugin
from yeartrace.routers import catalog as catalog_router
from yeartrace.routers import heatmap as heatmap_router
from yeartrace.routers import records as records_router
from yeartrace.core.errors import (
    YeartraceException,
    yeartrace_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)
from yeartrace.services.plugin import YeartracePlugin
from yeartrace.services.storage import DataStorage, SqlDataStorage

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    storage: Optional[DataStorage] = app.state.storage
    if storage is None:
        init_db()
        storage = SqlDataStorage(SessionLocal, key=settings.STORAGE_KEY)

    plugin = YeartracePlugin(storage)
    await plugin.load_settings()
    app.state.plugin = plugin
    logger.info("Yeartrace ready (%s)", settings.APP_ENV)
    try:
        yield
    finally:
        plugin.unload()


def create_app(storage: Optional[DataStorage] = None) -> FastAPI:
    """
    Build the API. `storage` replaces the database-backed document store,
    which is what the tests do.
    """
    app = FastAPI(
        title="Yeartrace API",
        description=(
            "**Habit tracker on a year heatmap**\n\n"
            "Log daily behaviors, get a daily score and status tier, and read "
            "the year heatmap and daily panel.\n\n"
            "All error responses follow the `{code, message, details}` envelope."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.storage = storage

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers (most specific first) ---
    app.add_exception_handler(YeartraceException, yeartrace_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --- Routers ---
    app.include_router(records_router.router)
    app.include_router(heatmap_router.router)
    app.include_router(catalog_router.router)

    @app.get("/health", tags=["health"], summary="Health check")
    def health(
        db: Session = Depends(get_db),
        plugin: YeartracePlugin = Depends(get_plugin),
    ):
        """
        Returns `{"status": "ok", "db": "ok"}` when both the API and the
        database are reachable. Returns HTTP 503 if the DB is down.
        """
        try:
            db.execute(text("SELECT 1"))
            db_status = "ok"
        except Exception:
            db_status = "unreachable"

        if db_status != "ok":
            return JSONResponse(
                status_code=503,
                content={"status": "error", "db": db_status},
            )
        return {
            "status": "ok",
            "db": "ok",
            "env": settings.APP_ENV,
            "records": len(plugin.store),
        }

    return app


app = create_app()
