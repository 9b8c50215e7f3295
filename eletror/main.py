"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eletror.api.v1 import router as v1_router
from eletror.core.config import settings
from eletror.core.database import SessionLocal, init_db
from eletror.core.kv_store import SQLKeyValueStore
from eletror.services.storage import StorageService

logger = logging.getLogger(__name__)


def create_app(storage: StorageService | None = None) -> FastAPI:
    """
    Build the API. Pass a storage service to run against another store (e.g. in tests);
    otherwise one backed by the SQL key-value table is created at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if storage is None:
            init_db()
            app.state.storage = StorageService.from_settings(SQLKeyValueStore(SessionLocal), settings)
            logger.info("Storage service ready (env=%s)", settings.APP_ENV)
        else:
            app.state.storage = storage
        yield

    app = FastAPI(
        title="Eletror Inventory API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Eletror Inventory API"}

    return app


app = create_app()
