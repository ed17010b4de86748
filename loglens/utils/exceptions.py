# loglens/utils/exceptions.py
from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """
    Базовая доменная ошибка приложения.
    Её перехватывает глобальный хэндлер и возвращает предсказуемый HTTP-ответ
    вида {"error": detail, **payload}.
    """

    def __init__(self, detail: str, *, status_code: int = 400, payload: Optional[dict[str, Any]] = None) -> None:
        """
        Args:
            detail: Человеко-понятное описание проблемы (уходит клиенту в поле error).
            status_code: Желаемый HTTP-статус (400 по умолчанию).
            payload: Доп. поля ответа, безопасные к отдаче клиенту (опционально).
        """
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        self.payload = payload or {}


SERVICES_UNAVAILABLE_MESSAGE = (
    "Unable to connect to backend services. "
    "Please ensure the ingestion and analytics services are running."
)


class DownstreamUnavailable(DomainError):
    """
    Соседний сервис недоступен: connect refused, таймаут, обрыв соединения.
    Клиенту уходит фиксированное сообщение, причина остаётся в логах.
    """

    def __init__(self, service: str, reason: str, *, payload: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            SERVICES_UNAVAILABLE_MESSAGE,
            status_code=503,
            payload=payload,
        )
        self.service = service
        self.reason = reason

    def __str__(self) -> str:
        return f"Failed to connect to {self.service} service: {self.reason}"


class DownstreamRejected(DomainError):
    """
    Соседний сервис ответил, но не 2xx (или не JSON).
    """

    def __init__(
        self,
        service: str,
        status: int,
        body: str,
        *,
        payload: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            f"{service.capitalize()} service error: {status} - {body}",
            status_code=500,
            payload=payload,
        )
        self.service = service
        self.status = status
        self.body = body
