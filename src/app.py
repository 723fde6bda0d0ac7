"""
User Records Backend API Server
CRUD over user records: validation, persistence and response mapping
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS, USER_STORE
from database.connection import init_database, close_database
from database.user_store import UserStore, PostgresUserStore, InMemoryUserStore
from api.routes import health, users
from services.users_service import UsersService
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the user store on startup unless one was injected.

    A store built here is discarded on shutdown so that a restart of the
    same app opens a fresh pool.
    """
    if getattr(app.state, "users_service", None) is not None:
        yield
        return

    db_pool = None
    if USER_STORE == "memory":
        store = InMemoryUserStore()
    else:
        db_pool = await init_database()
        store = PostgresUserStore(db_pool)
    app.state.users_service = UsersService(store)
    logger.info(f"Using {store.backend_name} user store")

    try:
        yield
    finally:
        app.state.users_service = None
        if db_pool is not None:
            await close_database(db_pool)


def create_app(store: Optional[UserStore] = None) -> FastAPI:
    """
    Create the FastAPI application

    Args:
        store: User store to serve from. When omitted the store named by
            USER_STORE is created during startup.
    """
    app = FastAPI(
        title="User Records Backend",
        description="Backend API for creating, listing, editing and deleting user records",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.users_service = UsersService(store) if store is not None else None

    # CORS middleware - any calling origin is allowed
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Trace-ID"],
    )

    setup_error_handling(app)

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(users.router, prefix="/users", tags=["Users"])

    return app


# FastAPI app instance is exported for use by uvicorn
# Server startup is handled by main.py at the project root
app = create_app()
