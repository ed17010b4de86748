# loglens/services/gateway_service.py

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from loglens.core.config import Settings
from loglens.utils.clock import utc_now_iso
from loglens.utils.exceptions import DomainError, DownstreamRejected, DownstreamUnavailable
from loglens.utils.text import scrub_surrogates

logger = logging.getLogger("services.gateway")

# Все ошибки gateway отдаются как {"success": false, "error": ...}
GATEWAY_ERROR_PAYLOAD = {"success": False}
DEFAULT_SUMMARY = "Analysis completed successfully"


class GatewayService:
    """
    Оркестрация: сначала ingestion, затем analytics. Строго последовательно,
    без отмены и без компенсаций: упавший шаг обрывает весь запрос.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            settings: Настройки (адреса сервисов, таймаут).
            transport: Транспорт httpx (в тестах MockTransport).
        """
        self.settings = settings or Settings()
        self._transport = transport

    async def submit_logs(self, log_data: Any) -> str:
        """
        Returns:
            Текст сводки от analytics.

        Raises:
            DomainError(400): пустые данные.
            DownstreamUnavailable(503): сервис недоступен по сети.
            DownstreamRejected(500): сервис ответил не 2xx / не JSON.
        """
        if not isinstance(log_data, str) or not log_data.strip():
            raise DomainError("No log data provided", status_code=400, payload=GATEWAY_ERROR_PAYLOAD)

        logger.info("Received log data for processing (%d chars)", len(log_data))
        logger.debug("Log data preview: %s...", log_data[:100])

        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self.settings.downstream_timeout,
        ) as client:
            ingestion_result = await self._post_json(
                client,
                "ingestion",
                f"{self.settings.ingestion_url}/ingest",
                {
                    "message": log_data,
                    "level": "info",
                    "service": "web-dashboard",
                    "timestamp": utc_now_iso(),
                },
            )
            logger.info("Logs sent to ingestion service, id=%s", ingestion_result.get("id"))

            analysis_result = await self._post_json(
                client,
                "analytics",
                f"{self.settings.analytics_url}/summarize",
                {"logData": log_data},
            )
            logger.info("AI analysis completed")

        summary = analysis_result.get("summary") or DEFAULT_SUMMARY
        return scrub_surrogates(summary if isinstance(summary, str) else str(summary))

    async def _post_json(
        self,
        client: httpx.AsyncClient,
        service: str,
        url: str,
        payload: Dict[str, Any],
    ) -> Dict[str, Any]:
        try:
            response = await client.post(url, json=payload)
        except (httpx.TransportError, httpx.InvalidURL) as e:
            reason = str(e) or type(e).__name__
            logger.error("Failed to reach %s service at %s: %s", service, url, reason)
            raise DownstreamUnavailable(service, reason, payload=GATEWAY_ERROR_PAYLOAD) from e

        logger.debug("%s response status: %s", service, response.status_code)
        if not response.is_success:
            logger.error("%s service error response: %s %s", service, response.status_code, response.text)
            raise DownstreamRejected(
                service, response.status_code, response.text, payload=GATEWAY_ERROR_PAYLOAD
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DownstreamRejected(
                service, response.status_code, "invalid JSON response", payload=GATEWAY_ERROR_PAYLOAD
            ) from e
        if not isinstance(data, dict):
            raise DownstreamRejected(
                service, response.status_code, "unexpected response shape", payload=GATEWAY_ERROR_PAYLOAD
            )
        return data
