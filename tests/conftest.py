"""
Общие фикстуры: изолированное окружение (логи и хранилище во временной папке),
хелпер для HTTP-запросов к ASGI-приложениям через httpx без поднятия сервера.
"""
import asyncio
import os
import sys
import tempfile
from pathlib import Path

project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

# До импорта приложений: setup_logging() создаёт LOG_DIR при импорте модуля
_tmp_root = Path(tempfile.mkdtemp(prefix="loglens-tests-"))
os.environ["LOG_DIR"] = str(_tmp_root / "logs")
os.environ["LOG_STORE_PATH"] = str(_tmp_root / "shared" / "logs" / "logs.jsonl")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from dotenv import load_dotenv
load_dotenv(dotenv_path=project_root / ".env", encoding="utf-8-sig")

import httpx
import pytest
from httpx import ASGITransport

from loglens.core.metrics import AnalyticsMetrics, IngestionMetrics
from loglens.repos.log_store import LogStore


def run_request(app, method: str, url: str, **kwargs) -> httpx.Response:
    """Один запрос к ASGI-приложению; исключения приложения превращаются в 500."""
    async def _send() -> httpx.Response:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            return await client.request(method, url, **kwargs)

    return asyncio.run(_send())


@pytest.fixture
def http():
    return run_request


@pytest.fixture
def store_path(tmp_path) -> Path:
    return tmp_path / "shared" / "logs" / "logs.jsonl"


@pytest.fixture
def store(store_path) -> LogStore:
    return LogStore(store_path)


@pytest.fixture
def ingestion_metrics() -> IngestionMetrics:
    return IngestionMetrics()


@pytest.fixture
def analytics_metrics() -> AnalyticsMetrics:
    return AnalyticsMetrics()


@pytest.fixture
def sample_logs() -> str:
    return "\n".join([
        "2024-01-15 10:30:00 INFO User logged in successfully",
        "2024-01-15 10:30:05 ERROR Database connection failed",
        "2024-01-15 10:30:10 WARN Disk usage at 85%",
        "2024-01-15 10:30:15 DEBUG cache hit ratio 0.93",
    ])
