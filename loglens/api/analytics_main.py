# loglens/api/analytics_main.py

import logging
from fastapi import FastAPI

from loglens.core.logger import setup_logging
from loglens.api.handlers import install_exception_handlers
from loglens.api.v1.analytics import router as analytics_router


# Настраиваем логи (файлы + консоль)
setup_logging("analytics")
logger = logging.getLogger("api.analytics")

app = FastAPI(title="AI Summarizer Service")

install_exception_handlers(
    app,
    logger=logger,
    internal_error=lambda exc: {"error": "Failed to generate summary", "summary": None},
)

app.include_router(analytics_router)
