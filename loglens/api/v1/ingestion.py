# loglens/api/v1/ingestion.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from loglens.api.deps import get_ingestion_service, get_log_store
from loglens.core.metrics import IngestionMetrics, get_ingestion_metrics
from loglens.repos.log_store import LogStore
from loglens.schemas.logs import (
    BulkIngestRequest,
    BulkIngestResponse,
    IngestionHealth,
    IngestRequest,
    IngestResponse,
    LogsQueryResponse,
)
from loglens.services.ingestion_service import IngestionService

router = APIRouter(tags=["ingestion"])

# Маршруты с файловым I/O объявлены через def: FastAPI выполняет их в threadpool


@router.post(
    "/ingest",
    response_model=IngestResponse,
    summary="Принять один лог",
)
def ingest_log(
    payload: IngestRequest,
    service: IngestionService = Depends(get_ingestion_service),
) -> IngestResponse:
    """
    Дописывает одну запись в общее хранилище. Поля, кроме message/level/service,
    сохраняются в metadata. Пустой message -> 400.
    """
    log_id = service.ingest(payload.model_dump())
    return IngestResponse(id=log_id)


@router.post(
    "/ingest/bulk",
    response_model=BulkIngestResponse,
    summary="Принять пачку логов",
)
def ingest_bulk(
    payload: BulkIngestRequest,
    service: IngestionService = Depends(get_ingestion_service),
) -> BulkIngestResponse:
    """
    Записи без message пропускаются без ошибки; в ответе число реально записанных.
    """
    ids = service.ingest_bulk(payload.logs)
    return BulkIngestResponse(
        processed=len(ids),
        ids=ids,
        message=f"{len(ids)} logs ingested successfully",
    )


@router.get(
    "/logs",
    response_model=LogsQueryResponse,
    summary="Последние записи хранилища",
    description=(
        "Читает хранилище целиком, фильтрует по service/level и возвращает хвост. "
        "limit должен быть >= 1: limit=0 даёт 422, а не все записи."
    ),
)
def list_logs(
    limit: int = Query(100, ge=1, description="Сколько последних записей вернуть"),
    service_name: Optional[str] = Query(None, alias="service"),
    level: Optional[str] = Query(None),
    service: IngestionService = Depends(get_ingestion_service),
) -> LogsQueryResponse:
    logs, count = service.query(limit=limit, service=service_name, level=level)
    return LogsQueryResponse(logs=logs, count=count)


@router.get("/health", response_model=IngestionHealth, tags=["health"])
async def health_check(store: LogStore = Depends(get_log_store)) -> IngestionHealth:
    return IngestionHealth(store_path=str(store.path), store_exists=store.path.exists())


@router.get("/metrics", tags=["metrics"])
async def metrics_endpoint(metrics: IngestionMetrics = Depends(get_ingestion_metrics)) -> Response:
    return Response(content=metrics.render(), media_type=metrics.content_type)
