# loglens/core/metrics.py
"""
Prometheus-метрики сервисов.

У каждого сервиса свой CollectorRegistry: метрики создаются один раз
при старте процесса и живут до его завершения (сброса нет).
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)


class ServiceMetrics:
    """
    База: собственный реестр + стандартные process/platform/gc коллекторы.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self) -> None:
        self.registry = CollectorRegistry()
        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)

    def render(self) -> bytes:
        """Текстовая выдача для GET /metrics."""
        return generate_latest(self.registry)

    def snapshot(self) -> Dict[str, float]:
        """
        Pull-снимок текущих значений: {"имя{label=value}": значение}.
        """
        values: Dict[str, float] = {}
        for metric in self.registry.collect():
            for sample in metric.samples:
                key = sample.name
                if sample.labels:
                    labels = ",".join(f'{k}="{v}"' for k, v in sorted(sample.labels.items()))
                    key = f"{key}{{{labels}}}"
                values[key] = sample.value
        return values


class IngestionMetrics(ServiceMetrics):
    def __init__(self) -> None:
        super().__init__()
        self.logs_received = Counter(
            "logs_received",
            "Number of logs received",
            registry=self.registry,
        )
        self.ingest_duration = Histogram(
            "log_ingest_duration_seconds",
            "Duration of log ingestion in seconds",
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1),
            registry=self.registry,
        )
        self.log_size = Histogram(
            "log_size_bytes",
            "Size of ingested logs in bytes",
            buckets=(100, 500, 1000, 5000, 10000, 50000),
            registry=self.registry,
        )


class AnalyticsMetrics(ServiceMetrics):
    def __init__(self) -> None:
        super().__init__()
        self.summaries_generated = Counter(
            "summaries_generated",
            "Number of AI summaries generated",
            registry=self.registry,
        )
        self.groq_api_calls = Counter(
            "groq_api_calls",
            "Total number of GROQ API calls made",
            registry=self.registry,
        )
        self.groq_api_duration = Histogram(
            "groq_api_duration_seconds",
            "Duration of GROQ API calls in seconds",
            buckets=(0.1, 0.5, 1, 2, 5, 10, 30),
            registry=self.registry,
        )
        self.summary_length = Histogram(
            "summary_length_chars",
            "Length of generated summaries in characters",
            buckets=(50, 100, 200, 500, 1000, 2000),
            registry=self.registry,
        )


@lru_cache(maxsize=1)
def get_ingestion_metrics() -> IngestionMetrics:
    return IngestionMetrics()


@lru_cache(maxsize=1)
def get_analytics_metrics() -> AnalyticsMetrics:
    return AnalyticsMetrics()
