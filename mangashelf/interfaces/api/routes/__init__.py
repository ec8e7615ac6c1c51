from fastapi import FastAPI

from .activity import router as activity_router
from .auth import router as auth_router
from .blog import router as blog_router
from .settings import router as settings_router
from .users import router as users_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(auth_router)
    app.include_router(activity_router)
    app.include_router(blog_router)
    app.include_router(settings_router)
    app.include_router(users_router)
