import logging
import os
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path

import setproctitle

import settings
from brotli_asgi import BrotliMiddleware
from fastapi import FastAPI, APIRouter

from exceptions import register_exception_handlers
from routes.auth_route import router as auth_router
from routes.friendship_route import router as friendship_router
from routes.messages_route import router as messages_router
from routes.notifications_route import router as notifications_router
from routes.presence_route import router as presence_router
from routes.realtime_route import router as realtime_router
from routes.stats_route import router as stats_router
from routes.users_route import router as users_router
from settings import PROJECT_PATH
from starlette.middleware import Middleware
from starlette.middleware.sessions import SessionMiddleware

from utils import setup_logs

logger = logging.getLogger("matchup.main")
setup_logs()
setproctitle.setproctitle("Matchup API")


def get_version() -> str:
    """Read version from pyproject.toml"""

    with open(PROJECT_PATH / "pyproject.toml", "rb") as f:
        pyproject = tomllib.load(f)
    return pyproject["project"]["version"]


def update_database():  # pragma: no cover
    """Init the DB or run the Alembic migrations"""
    import alembic.config

    if not Path("alembic.ini").is_file():
        os.chdir(settings.BACKEND_DIR)

    try:
        alembic.config.main(
            argv=[
                "--raiseerr",
                "upgrade",
                "head",
            ]
        )
    except Exception as e:
        logger.exception(f"Cannot run DB migrations: {e}")


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app"""
    logger.debug("Starting...")
    update_database()
    yield
    logger.debug("Closing app")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""

    app = FastAPI(
        title="Matchup",
        description="Find players, make friends, keep score",
        version=get_version(),
        middleware=[
            Middleware(BrotliMiddleware, minimum_size=1000),
            Middleware(SessionMiddleware, secret_key=settings.SESSION_SECRET_KEY),
        ],
        swagger_ui_parameters={
            "defaultModelsExpandDepth": 0,
        },  # collapse the swagger schema
        lifespan=app_lifespan,
    )
    register_exception_handlers(app)

    # Mount routers
    api_router = APIRouter()
    api_router.include_router(auth_router, tags=["auth"])
    api_router.include_router(friendship_router)
    api_router.include_router(presence_router)
    api_router.include_router(messages_router)
    api_router.include_router(notifications_router)
    api_router.include_router(stats_router)
    api_router.include_router(users_router)
    api_router.include_router(realtime_router)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app
