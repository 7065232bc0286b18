"""FastAPI application entry point. Registers logging, middleware, exception handlers and API routers."""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from app.config import settings
from app.database import Base, engine
from app.exceptions import InternalError, PlacewikiException
import app.models  # noqa: F401 - registers model metadata
from app.routers import auth, comments, entries, places, tags, users

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Placewiki API",
    description="Geolocated, community-edited place wiki with revisions, threaded comments and votes",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("%s %s failed after %.4fs", request.method, request.url.path, time.time() - start_time)
        raise
    logger.info(
        "%s %s -> %s (%.4fs)",
        request.method, request.url.path, response.status_code, time.time() - start_time,
    )
    return response


@app.exception_handler(PlacewikiException)
async def placewiki_exception_handler(request: Request, exc: PlacewikiException):
    if exc.status_code >= 500:
        logger.error("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SQLAlchemyError)
async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Register all routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(entries.router)
app.include_router(comments.router)
app.include_router(tags.router)
app.include_router(places.router)


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Placewiki API"}
