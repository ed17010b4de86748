# loglens/api/ingestion_main.py

import logging
from fastapi import FastAPI

from loglens.core.logger import setup_logging
from loglens.api.handlers import install_exception_handlers
from loglens.api.v1.ingestion import router as ingestion_router


# Настраиваем логи (файлы + консоль)
setup_logging("ingestion")
logger = logging.getLogger("api.ingestion")

app = FastAPI(title="Log Ingestion Service")

install_exception_handlers(
    app,
    logger=logger,
    internal_error=lambda exc: {"error": "Internal server error"},
)

app.include_router(ingestion_router)
