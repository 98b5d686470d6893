from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from resort_deals.db.session import shutdown
from resort_deals.dependencies import DB
from resort_deals.exceptions import (
    ConflictError,
    DomainError,
    InvalidParameterError,
    NotFoundError,
    RepositoryUnavailableError,
)
from resort_deals.logging import get_logger
from resort_deals.middleware import RequestIDMiddleware
from resort_deals.routers import calendar, compare, deal, preference, price_history
from resort_deals.schemas.error import ErrorDetail, ErrorResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Close database connections on shutdown."""
    yield
    await shutdown()


app = FastAPI(title="Resort Deals", lifespan=lifespan)
app.add_middleware(RequestIDMiddleware)
app.include_router(deal.router)
app.include_router(compare.router)
app.include_router(calendar.router)
app.include_router(price_history.router)
app.include_router(preference.router)


def _error_json(code: str, message: str) -> dict[str, object]:
    """Build the standard error envelope as a dict for JSONResponse."""
    return ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump()


@app.exception_handler(InvalidParameterError)
async def invalid_parameter_handler(request: Request, exc: InvalidParameterError) -> JSONResponse:
    """Return 400 for rejected request parameters."""
    logger.info("invalid_parameter", error=exc.message, path=request.url.path)
    return JSONResponse(status_code=400, content=_error_json("invalid_parameter", exc.message))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Return 404 with the entity details."""
    return JSONResponse(status_code=404, content=_error_json("not_found", exc.message))


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """Return 409 when the request raced another update."""
    return JSONResponse(status_code=409, content=_error_json("conflict", exc.message))


@app.exception_handler(RepositoryUnavailableError)
async def repository_unavailable_handler(
    request: Request, exc: RepositoryUnavailableError
) -> JSONResponse:
    """Return 503 when the database could not answer."""
    logger.error(
        "repository_unavailable",
        operation=exc.operation,
        cause=repr(exc.cause),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=503,
        content=_error_json("repository_unavailable", exc.message),
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Return 400 for generic domain-level violations."""
    logger.warning("domain_error", error=exc.message, path=request.url.path)
    return JSONResponse(status_code=400, content=_error_json("domain_error", exc.message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions and return a safe error response.

    - Logs full exception with traceback (includes request_id from context)
    - Returns generic error to client (no stack traces leaked)
    """
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content=_error_json("internal_error", "Internal server error"),
    )


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Health check; 200 only if the database answers a ping query."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
