# loglens/services/analytics_service.py

from __future__ import annotations

import logging
from typing import Any, Optional

from loglens.core.metrics import AnalyticsMetrics, get_analytics_metrics
from loglens.repos.log_store import LogStore
from loglens.schemas.summaries import SummarizeResponse, SummaryMetadata
from loglens.services.llm_summarizer import LLMSummarizer
from loglens.utils.clock import utc_now_iso
from loglens.utils.exceptions import DomainError

logger = logging.getLogger("services.analytics")

MODEL_TAG = "groq-llama3"


class AnalyticsService:
    """
    Генерация сводки по сырому тексту логов + аудит-строка в общем хранилище.
    """

    def __init__(
        self,
        summarizer: LLMSummarizer,
        store: LogStore,
        metrics: Optional[AnalyticsMetrics] = None,
    ):
        self.summarizer = summarizer
        self.store = store
        self.metrics = metrics or get_analytics_metrics()

    async def summarize(self, log_data: Any) -> SummarizeResponse:
        """
        Raises:
            DomainError(400): logData отсутствует, не строка или пустой.
        """
        if not isinstance(log_data, str) or not log_data.strip():
            raise DomainError(
                "Log data is required",
                status_code=400,
                payload={"summary": None},
            )

        logger.info("Processing log summarization request (%d chars)", len(log_data))

        outcome = await self.summarizer.summarize(log_data)
        summary = outcome.text

        self.metrics.summaries_generated.inc()
        self.metrics.summary_length.observe(len(summary))

        self._write_audit(len(log_data), len(summary))

        logger.info("Summary generated via %s (%d chars)", outcome.source, len(summary))
        return SummarizeResponse(
            summary=summary,
            metadata=SummaryMetadata(
                input_length=len(log_data),
                output_length=len(summary),
                timestamp=utc_now_iso(),
                model=MODEL_TAG,
                source=outcome.source,
            ),
        )

    def _write_audit(self, input_length: int, output_length: int) -> None:
        # Пишем только если папка хранилища уже создана ingestion-сервисом
        if not self.store.directory_exists():
            logger.debug("Store directory %s missing, audit line skipped", self.store.path.parent)
            return
        self.store.append({
            "timestamp": utc_now_iso(),
            "action": "summarize",
            "inputLength": input_length,
            "outputLength": output_length,
            "processed": True,
        })
