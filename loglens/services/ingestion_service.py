# loglens/services/ingestion_service.py

from __future__ import annotations

import logging
import random
import string
import time
from typing import Any, List, Mapping, Optional, Tuple

from loglens.core.metrics import IngestionMetrics, get_ingestion_metrics
from loglens.repos.log_store import LogStore
from loglens.schemas.logs import LogRecord
from loglens.utils.clock import utc_now_iso
from loglens.utils.exceptions import DomainError

logger = logging.getLogger("services.ingestion")

_ID_ALPHABET = string.ascii_lowercase + string.digits
_RESERVED_FIELDS = ("message", "level", "service")


def generate_log_id() -> str:
    """
    Локально-уникальный id: миллисекунды epoch + 9 случайных символов base36.
    Не криптостойкий.
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{int(time.time() * 1000)}{suffix}"


def build_record(entry: Mapping[str, Any]) -> Optional[LogRecord]:
    """
    Собирает LogRecord из пришедшего объекта.
    Пустой/отсутствующий message -> None (решение о 400 или пропуске за вызывающим).
    """
    message = entry.get("message")
    if not message:
        return None
    if not isinstance(message, str):
        message = str(message)

    metadata = {k: v for k, v in entry.items() if k not in _RESERVED_FIELDS}
    return LogRecord(
        timestamp=utc_now_iso(),
        level=entry.get("level", "info"),
        service=entry.get("service", "unknown"),
        message=message,
        metadata=metadata,
        id=generate_log_id(),
    )


class IngestionService:
    """
    Приём логов в общее NDJSON-хранилище и выборка из него.
    """

    def __init__(self, store: LogStore, metrics: Optional[IngestionMetrics] = None):
        """
        :param store: общее хранилище логов
        :param metrics: метрики ingestion (по умолчанию процессные)
        """
        self.store = store
        self.metrics = metrics or get_ingestion_metrics()

    def ingest(self, entry: Mapping[str, Any]) -> str:
        """
        Принять один лог. Возвращает сгенерированный id.

        Raises:
            DomainError(400): если message пустой или отсутствует.
        """
        started = time.perf_counter()

        record = build_record(entry)
        if record is None:
            raise DomainError("Message is required", status_code=400)

        self.store.ensure_directory()
        line = self.store.append(record.model_dump())

        self.metrics.logs_received.inc()
        self.metrics.ingest_duration.observe(time.perf_counter() - started)
        self.metrics.log_size.observe(len(line))

        logger.info("ingest id=%s service=%s level=%s", record.id, record.service, record.level)
        return record.id

    def ingest_bulk(self, logs: Any) -> List[str]:
        """
        Принять пачку логов. Записи без message молча пропускаются.

        Returns:
            Список id реально записанных логов (может быть пустым).

        Raises:
            DomainError(400): если logs не список или пустой список.
        """
        started = time.perf_counter()

        if not isinstance(logs, list) or not logs:
            raise DomainError("Logs array is required", status_code=400)

        self.store.ensure_directory()

        ids: List[str] = []
        for entry in logs:
            if not isinstance(entry, Mapping):
                continue
            record = build_record(entry)
            if record is None:
                continue
            self.store.append(record.model_dump())
            ids.append(record.id)

        self.metrics.logs_received.inc(len(ids))
        self.metrics.ingest_duration.observe(time.perf_counter() - started)

        skipped = len(logs) - len(ids)
        logger.info("ingest_bulk processed=%d skipped=%d", len(ids), skipped)
        return ids

    def query(
        self,
        limit: int = 100,
        service: Optional[str] = None,
        level: Optional[str] = None,
    ) -> Tuple[List[dict], int]:
        """
        Последние `limit` записей (в порядке файла) с точным фильтром по service/level.
        """
        records = self.store.read_all()
        matched = [
            r for r in records
            if (not service or r.get("service") == service)
            and (not level or r.get("level") == level)
        ]
        tail = matched[-limit:] if limit > 0 else []
        logger.debug("query limit=%s service=%r level=%r -> %d", limit, service, level, len(tail))
        return tail, len(tail)
