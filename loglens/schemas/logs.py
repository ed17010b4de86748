"""
Pydantic-схемы ingestion-сервиса: запись лога в общем хранилище,
запросы/ответы /ingest, /ingest/bulk и /logs.
"""
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from loglens.utils.text import scrub_surrogates


class LogRecord(BaseModel):
    """
    Одна строка NDJSON-хранилища. Создаётся при ingest, больше не меняется.
    Порядок полей совпадает с порядком ключей в файле.
    """
    timestamp: str = Field(..., description="ISO-8601 UTC, момент приёма")
    level: Any = Field(default="info")
    service: Any = Field(default="unknown")
    message: str = Field(..., min_length=1)
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Прочие поля, переданные клиентом")
    id: str = Field(..., description="Локально-уникальный id: время + случайный суффикс")


class TextPayload(BaseModel):
    """Базовая схема входящих тел: непарные суррогаты в строках заменяются на U+FFFD."""

    @model_validator(mode="before")
    @classmethod
    def _scrub_surrogates(cls, data: Any) -> Any:
        return scrub_surrogates(data)


# ----- Single ingest -----

class IngestRequest(TextPayload):
    """
    Тело POST /ingest. Всё, кроме message/level/service, уходит в metadata.
    message не обязателен на уровне схемы: пустой/отсутствующий -> 400 из сервиса.
    """
    model_config = ConfigDict(extra="allow")

    message: Any = None
    level: Any = "info"
    service: Any = "unknown"


class IngestResponse(BaseModel):
    success: bool = True
    id: str
    message: str = "Log ingested successfully"


# ----- Bulk ingest -----

class BulkIngestRequest(TextPayload):
    # Any, а не List: "не массив" должен давать 400, а не 422
    logs: Any = None


class BulkIngestResponse(BaseModel):
    success: bool = True
    processed: int = Field(..., ge=0)
    ids: List[str]
    message: str


# ----- Query -----

class LogsQueryResponse(BaseModel):
    logs: List[Dict[str, Any]]
    count: int = Field(..., ge=0)


class IngestionHealth(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "healthy"
    service: str = "log-ingestion"
    store_path: str = Field(..., alias="storePath")
    store_exists: bool = Field(..., alias="storeExists")
