"""Client Registry - FastAPI Entry Point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from . import config
from .database import init_db, seed_clients, close_all_db
from .exceptions import register_exception_handlers
from .middleware import RequestLoggingMiddleware
from .routes.clients import router as clients_router

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=level or config.LOG_LEVEL, format=config.LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: runs before the application starts accepting requests
    init_db()
    if config.SEED_DATA:
        seed_clients()
    logger.info("Client API ready")
    yield
    # Shutdown
    close_all_db()


configure_logging()

app = FastAPI(title="Client Registry", lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

app.include_router(clients_router)
