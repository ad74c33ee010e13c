"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from config.settings import settings
from src.ft_cache.api.dependencies import get_cache_registry
from src.ft_cache.application.registry import CacheRegistry
from src.ft_category.api.router import router as category_router
from src.ft_common.database import close_client, get_database, ping
from src.ft_common.errors import AppError, StoreError
from src.ft_common.response import error_response
from src.ft_gateway.middleware.request_log import RequestLogMiddleware
from src.ft_query.store import DocumentDatabase
from src.ft_report.api.router import router as report_router
from src.ft_transaction.api.router import expense_router, income_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("ft.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify MongoDB, start cache sweeps. Shutdown: stop both."""
    # Startup
    await ping(get_database())
    app.state.caches.start_sweepers(settings.CACHE_SWEEP_INTERVAL_SECONDS)
    yield
    # Shutdown
    await app.state.caches.stop_sweepers()
    await close_client()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)
app.state.caches = CacheRegistry.from_settings(settings)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    err = StoreError()
    resp = error_response(err.code, err.message, request)
    return JSONResponse(status_code=err.http_status, content=resp.model_dump())


app.include_router(category_router, prefix="/api/v1")
app.include_router(expense_router, prefix="/api/v1")
app.include_router(income_router, prefix="/api/v1")
app.include_router(report_router, prefix="/api/v1")


@app.get("/health")
async def health(
    db: Annotated[DocumentDatabase, Depends(get_database)],
    caches: Annotated[CacheRegistry, Depends(get_cache_registry)],
) -> JSONResponse:
    try:
        connected = await ping(db)
    except PyMongoError:
        connected = False
    body = {
        "status": "healthy" if connected else "unhealthy",
        "version": "0.1.0",
        "database": {"connected": connected},
        "cache": {name: asdict(stats) for name, stats in caches.get_all_stats().items()},
    }
    return JSONResponse(status_code=200 if connected else 503, content=body)
