# loglens/api/deps.py
from functools import lru_cache

from fastapi import Depends

from loglens.core.config import Settings
from loglens.core.metrics import get_analytics_metrics, get_ingestion_metrics
from loglens.repos.log_store import LogStore
from loglens.services.analytics_service import AnalyticsService
from loglens.services.gateway_service import GatewayService
from loglens.services.ingestion_service import IngestionService
from loglens.services.llm_summarizer import LLMSummarizer


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Настройки читаются из окружения один раз на процесс."""
    return Settings()


def get_log_store(settings: Settings = Depends(get_settings)) -> LogStore:
    return LogStore(settings.log_store_path)


def get_ingestion_service(store: LogStore = Depends(get_log_store)) -> IngestionService:
    return IngestionService(store, get_ingestion_metrics())


def get_llm_summarizer(settings: Settings = Depends(get_settings)) -> LLMSummarizer:
    return LLMSummarizer(settings, get_analytics_metrics())


def get_analytics_service(
    summarizer: LLMSummarizer = Depends(get_llm_summarizer),
    store: LogStore = Depends(get_log_store),
) -> AnalyticsService:
    return AnalyticsService(summarizer, store, get_analytics_metrics())


def get_gateway_service(settings: Settings = Depends(get_settings)) -> GatewayService:
    return GatewayService(settings)
