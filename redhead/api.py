from fastapi import FastAPI
from redhead.auth.controller import router as auth_router
from redhead.users.controller import router as users_router
from redhead.generation.controller import router as generation_router
from redhead.styles.controller import router as styles_router
from redhead.history.controller import router as history_router
from redhead.references.controller import router as references_router


def register_routes(app: FastAPI) -> None:
    """Register all routes for the FastAPI application."""
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(generation_router)
    app.include_router(styles_router)
    app.include_router(history_router)
    app.include_router(references_router)
