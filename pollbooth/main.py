# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from pollbooth.config import CORS_ORIGINS, MONGO_DB
from pollbooth.database.connection import Backend, connect
from pollbooth.routes.auth_routes import router as auth_router
from pollbooth.routes.election_routes import router as election_router
from pollbooth.routes.results_routes import router as results_router
from pollbooth.routes.vote_routes import vote_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(backend: Optional[Backend] = None) -> FastAPI:
    """Build the API around ``backend``; connect from config when omitted."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            app.state.backend.ensure_indexes()
        except Exception as e:
            logger.error(f"Failed to prepare MongoDB indexes: {e}")
            raise
        yield

    app = FastAPI(title="Campus Election Polling Booth API", lifespan=lifespan)
    app.state.backend = backend if backend is not None else connect()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(election_router)
    app.include_router(vote_router)
    app.include_router(results_router)

    @app.get("/", tags=["Root"])
    def read_root():
        return {"message": "Welcome to the Campus Election Polling Booth API"}

    @app.get("/health", tags=["Root"])
    def health_check():
        return {"status": "healthy", "database": MONGO_DB}

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


app = create_app()
