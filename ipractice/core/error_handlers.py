import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from ipractice.core.errors import (
    CommentWriteError,
    ConcurrencyConflictError,
    InvalidTimeRangeError,
    NotFoundError,
    SimulatedFailureError,
)

logger = logging.getLogger(__name__)

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'
CONCURRENCY_CONFLICT_DETAIL = 'The record was modified by another request. Reload and try again.'


def _detail(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'detail': detail})


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _detail(status.HTTP_404_NOT_FOUND, str(exc))


async def invalid_time_range_handler(request: Request, exc: InvalidTimeRangeError) -> JSONResponse:
    return _detail(status.HTTP_400_BAD_REQUEST, str(exc))


async def concurrency_conflict_handler(request: Request, exc: ConcurrencyConflictError) -> JSONResponse:
    return _detail(status.HTTP_409_CONFLICT, CONCURRENCY_CONFLICT_DETAIL)


async def stale_data_handler(request: Request, exc: StaleDataError) -> JSONResponse:
    logger.warning('Optimistic concurrency check failed during flush: %s', exc)
    return _detail(status.HTTP_409_CONFLICT, CONCURRENCY_CONFLICT_DETAIL)


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception('Database error while handling %s %s', request.method, request.url.path)
    return _detail(status.HTTP_503_SERVICE_UNAVAILABLE, DATABASE_UNAVAILABLE_DETAIL)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(InvalidTimeRangeError, invalid_time_range_handler)
    app.add_exception_handler(ConcurrencyConflictError, concurrency_conflict_handler)
    app.add_exception_handler(SimulatedFailureError, internal_error_handler)
    app.add_exception_handler(CommentWriteError, internal_error_handler)
    app.add_exception_handler(StaleDataError, stale_data_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
