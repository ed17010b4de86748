# loglens/api/handlers.py

import logging
from typing import Any, Callable, Dict

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from loglens.utils.exceptions import DomainError


def install_exception_handlers(
    app: FastAPI,
    *,
    logger: logging.Logger,
    internal_error: Callable[[Exception], Dict[str, Any]],
) -> None:
    """
    Общие хэндлеры для всех трёх сервисов.

    internal_error строит тело 500-ответа: у каждого сервиса своя форма.
    """

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        if exc.status_code >= 500:
            logger.error("Domain error at %s: %s", request.url.path, exc)
        else:
            logger.warning("Rejected request at %s: %s", request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail, **exc.payload},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error at %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception at %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=internal_error(exc),
        )
