import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from folio.core.config import settings
from folio.core.exceptions import (
    BlogError,
    DuplicateKeyError,
    ForeignKeyViolationError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
)
from folio.core.log import setup_logging
from folio.db.session import create_db_and_tables

logger = logging.getLogger(__name__)

# Most specific first; StorageError is a StoreError
ERROR_STATUS_CODES = [
    (ValidationError, 422),
    (NotFoundError, 404),
    (PermissionDeniedError, 403),
    (DuplicateKeyError, 409),
    (ForeignKeyViolationError, 409),
    (StoreError, 503),
]


def status_code_for(error: BlogError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    create_db_and_tables()
    logger.info("%s started", settings.PROJECT_NAME)
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
    description="Content API for the portfolio blog: posts, tags and media"
)


@app.exception_handler(BlogError)
async def blog_error_handler(request: Request, exc: BlogError):
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    content = {"detail": exc.message}
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=status_code, content=content)


@app.get("/")
def read_root():
    return {"message": "Welcome to Folio API. Visit /docs for Swagger UI."}

from folio.routers import blog, tags, media

app.include_router(blog.router, prefix="/api/v1/posts", tags=["posts"])
app.include_router(tags.router, prefix="/api/v1/tags", tags=["tags"])
app.include_router(media.router, prefix="/api/v1/media", tags=["media"])

# Add CORS
from fastapi.middleware.cors import CORSMiddleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
