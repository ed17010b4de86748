"""
Конфигурация из окружения и процессные метрики.
"""
import pytest

from loglens.core.config import Settings
from loglens.core.metrics import (
    AnalyticsMetrics,
    IngestionMetrics,
    get_analytics_metrics,
    get_ingestion_metrics,
)

ENV_VARS = (
    "GROQ_API_KEY", "GROQ_API_URL", "GROQ_MODEL", "GROQ_TIMEOUT_SECONDS",
    "INGESTION_URL", "ANALYTICS_URL", "DOWNSTREAM_TIMEOUT_SECONDS", "PORT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings()
    assert s.groq_api_url == "https://api.groq.com/openai/v1/chat/completions"
    assert s.groq_model == "llama3-8b-8192"
    assert s.groq_timeout == 25.0
    assert s.ingestion_url == "http://localhost:3001"
    assert s.analytics_url == "http://localhost:3002"
    assert s.groq_configured is False
    assert s.port_for("gateway") == 3000
    assert s.port_for("ingestion") == 3001
    assert s.port_for("analytics") == 3002


def test_env_overrides(clean_env):
    clean_env.setenv("GROQ_API_KEY", "gsk_123")
    clean_env.setenv("GROQ_TIMEOUT_SECONDS", "5.5")
    clean_env.setenv("INGESTION_URL", "http://ingest:9000/")
    clean_env.setenv("PORT", "8080")
    s = Settings()
    assert s.groq_configured is True
    assert s.groq_timeout == 5.5
    assert s.ingestion_url == "http://ingest:9000"
    assert s.port_for("analytics") == 8080


def test_invalid_numbers_raise(clean_env):
    clean_env.setenv("GROQ_TIMEOUT_SECONDS", "soon")
    with pytest.raises(RuntimeError):
        Settings()

    clean_env.delenv("GROQ_TIMEOUT_SECONDS")
    clean_env.setenv("PORT", "http")
    with pytest.raises(RuntimeError):
        Settings().port_for("gateway")


def test_unknown_service_port(clean_env):
    with pytest.raises(RuntimeError):
        Settings().port_for("billing")


def test_process_metrics_are_singletons():
    assert get_ingestion_metrics() is get_ingestion_metrics()
    assert get_analytics_metrics() is get_analytics_metrics()


def test_separate_instances_do_not_share_state():
    a, b = IngestionMetrics(), IngestionMetrics()
    a.logs_received.inc(3)
    assert a.snapshot()["logs_received_total"] == 3
    assert b.snapshot()["logs_received_total"] == 0


def test_render_contains_histogram_buckets():
    m = AnalyticsMetrics()
    m.summary_length.observe(120)
    text = m.render().decode("utf-8")
    assert 'summary_length_chars_bucket{le="200.0"} 1.0' in text
    assert 'summary_length_chars_bucket{le="100.0"} 0.0' in text
