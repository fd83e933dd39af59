from contextlib import asynccontextmanager
from typing import Any, cast

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import get_logger
from app.api import posts, categories, upload
from app.db import create_db_and_tables
from app.middleware.context import RequestContextMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 50)
    logger.info("Lumina Blog API starting")
    logger.info("=" * 50)

    if settings.using_default_secret:
        logger.warning("AUTH_SECRET is not set; using the insecure built-in default")
    if not settings.R2_PUBLIC_DOMAIN:
        logger.warning("R2_PUBLIC_DOMAIN is not set; uploads will fail")

    create_db_and_tables()
    yield


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

register_exception_handlers(app)

app.add_middleware(cast(Any, RequestContextMiddleware))

# Public read-only front end and the separately hosted editor both call
# this API, so every origin is allowed.
app.add_middleware(
    cast(Any, CORSMiddleware),
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["X-Request-ID"],
)

app.include_router(posts.router, prefix=f"{settings.API_PREFIX}/posts", tags=["posts"])
app.include_router(categories.router, prefix=f"{settings.API_PREFIX}/categories", tags=["categories"])
app.include_router(upload.router, prefix=f"{settings.API_PREFIX}/upload", tags=["upload"])


@app.get("/")
def root():
    return {"message": "Welcome to Lumina Blog API"}


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "healthy"}
