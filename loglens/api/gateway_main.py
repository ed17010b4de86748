# loglens/api/gateway_main.py

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from loglens.core.logger import setup_logging
from loglens.api.handlers import install_exception_handlers
from loglens.api.v1.gateway import router as gateway_router


# Настраиваем логи (файлы + консоль)
setup_logging("gateway")
logger = logging.getLogger("api.gateway")

app = FastAPI(title="Log Analysis API Gateway")

# CORS: дашборд может жить на другом origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _gateway_internal_error(exc: Exception) -> dict:
    return {
        "success": False,
        "error": str(exc) or "An error occurred while processing the logs",
    }


install_exception_handlers(app, logger=logger, internal_error=_gateway_internal_error)

app.include_router(gateway_router)
