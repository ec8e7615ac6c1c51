from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mangashelf.application.use_cases.activity import build_activity_recorder
from mangashelf.config import get_settings
from mangashelf.infrastructure.database import engine, initialize_database
from mangashelf.infrastructure.repositories import DocumentRepository
from mangashelf.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and the shared collaborators, then release them on shutdown."""

    settings = get_settings()
    initialize_database()
    documents = DocumentRepository()
    app.state.documents = documents
    app.state.activity_recorder = build_activity_recorder(settings, documents)
    yield
    await app.state.activity_recorder.notifier.aclose()
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="mangashelf", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
