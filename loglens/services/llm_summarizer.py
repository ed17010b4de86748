# loglens/services/llm_summarizer.py
"""
Сводка по логам через внешний chat/completions API (Groq).

Контракт: summarize() никогда не бросает исключений. Любая ошибка внешнего
вызова (транспорт, таймаут, не-2xx, кривой ответ) превращается в Degraded
с локальной сводкой из fallback_summarizer.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Union

import httpx

from loglens.core.config import Settings
from loglens.core.metrics import AnalyticsMetrics, get_analytics_metrics
from loglens.services.fallback_summarizer import generate_fallback_summary
from loglens.utils.text import scrub_surrogates

logger = logging.getLogger("services.llm_summarizer")

SYSTEM_PROMPT = (
    "You are an expert system administrator and log analyst with deep experience "
    "in troubleshooting and monitoring applications."
)

USER_PROMPT_TEMPLATE = """You are an expert log analyzer. Analyze the following log data and provide a structured analysis in this EXACT format. Do not deviate from this format:

SUMMARY: Info - X, Error - Y, Warning - Z, Other - W

LOG ANALYSIS:
🔍 Log 1: [Show the actual log line here]
📝 Analysis: [Brief analysis of what this log means]
💡 Action: [If there's an issue, provide a solution, otherwise say "No action needed"]

🔍 Log 2: [Show the actual log line here]
📝 Analysis: [Brief analysis of what this log means]
💡 Action: [If there's an issue, provide a solution, otherwise say "No action needed"]

Continue this pattern for EVERY single log line in the data. Each log entry must have all three parts: 🔍, 📝, and 💡.

Log Data:
{log_data}

Remember: Analyze EACH log line individually and provide the complete structured output above. Keep each analysis concise but complete."""


@dataclass(frozen=True)
class ExternalSuccess:
    """Текст, полученный от внешней модели."""
    text: str
    source: ClassVar[str] = "llm"


@dataclass(frozen=True)
class Degraded:
    """Локальная сводка; в reason причина сбоя внешнего вызова."""
    text: str
    reason: str
    source: ClassVar[str] = "fallback"


SummaryOutcome = Union[ExternalSuccess, Degraded]


class CompletionFormatError(ValueError):
    """Ответ API пришёл, но без пригодного choices[0].message.content."""


def build_messages(log_data: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": USER_PROMPT_TEMPLATE.format(log_data=log_data)},
    ]


def extract_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise CompletionFormatError(f"unexpected completion payload: {e!r}") from e
    if not isinstance(content, str) or not content.strip():
        raise CompletionFormatError("empty completion content")
    return scrub_surrogates(content)


class LLMSummarizer:
    """
    Один синхронный (в рамках запроса) вызов внешнего API с таймаутом, без ретраев.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        metrics: Optional[AnalyticsMetrics] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            settings: Настройки (если None, создаются новые).
            metrics: Метрики analytics-сервиса (по умолчанию процессные).
            transport: Транспорт httpx; в тестах подменяется на MockTransport.
        """
        self.settings = settings or Settings()
        self.metrics = metrics or get_analytics_metrics()
        self._transport = transport

    def build_payload(self, log_data: str) -> Dict[str, Any]:
        return {
            "model": self.settings.groq_model,
            "messages": build_messages(log_data),
            "max_tokens": 1500,
            "temperature": 0.1,
            "top_p": 0.9,
        }

    async def _request_completion(self, log_data: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.settings.groq_api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self.settings.groq_timeout,
        ) as client:
            response = await client.post(
                self.settings.groq_api_url,
                json=self.build_payload(log_data),
                headers=headers,
            )
            response.raise_for_status()
            return extract_content(response.json())

    async def summarize(self, log_data: str) -> SummaryOutcome:
        self.metrics.groq_api_calls.inc()
        try:
            with self.metrics.groq_api_duration.time():
                text = await self._request_completion(log_data)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            reason = _describe_failure(e)
            logger.warning("GROQ API call failed, using fallback summary: %s", reason)
            return Degraded(text=generate_fallback_summary(log_data), reason=reason)

        logger.info("GROQ response length: %d", len(text))
        logger.debug("GROQ response preview: %s...", text[:200])
        return ExternalSuccess(text=text)


def _describe_failure(exc: Exception) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        body = exc.response.text[:500]
        return f"status {exc.response.status_code}: {body}"
    if isinstance(exc, httpx.TimeoutException):
        return f"timeout: {exc!r}"
    return f"{type(exc).__name__}: {exc}"
