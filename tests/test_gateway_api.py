"""
HTTP-тесты gateway: последовательный вызов ingestion -> analytics,
классификация ошибок (503 недоступен / 500 отказ), /render, /health.

Соседние сервисы либо подменяются MockTransport, либо (сквозной тест)
маршрутизируются в настоящие ASGI-приложения ingestion и analytics.
"""
import json

import httpx
import pytest
from httpx import ASGITransport

from loglens.api import analytics_main, ingestion_main
from loglens.api.deps import (
    get_analytics_service,
    get_gateway_service,
    get_ingestion_service,
    get_settings,
)
from loglens.api.gateway_main import app
from loglens.core.config import Settings
from loglens.services.analytics_service import AnalyticsService
from loglens.services.fallback_summarizer import generate_fallback_summary
from loglens.services.gateway_service import GatewayService
from loglens.services.ingestion_service import IngestionService
from loglens.services.llm_summarizer import LLMSummarizer
from loglens.utils.exceptions import SERVICES_UNAVAILABLE_MESSAGE


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("INGESTION_URL", "http://ingestion.test:3001")
    monkeypatch.setenv("ANALYTICS_URL", "http://analytics.test:3002/")
    return Settings()


@pytest.fixture(autouse=True)
def _clear_overrides():
    yield
    for application in (app, ingestion_main.app, analytics_main.app):
        application.dependency_overrides.clear()


def use_downstream(settings, handler):
    service = GatewayService(settings, transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_gateway_service] = lambda: service
    return app


def test_submit_logs_success(http, settings):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.url.host, request.url.path, json.loads(request.content)))
        if request.url.path == "/ingest":
            return httpx.Response(200, json={"success": True, "id": "1", "message": "ok"})
        return httpx.Response(200, json={"summary": "SUMMARY: Info - 1, Error - 0, Warning - 0, Other - 0"})

    resp = http(use_downstream(settings, handler), "POST", "/submit-logs", json={"logData": "INFO hi"})
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"success": True, "summary": "SUMMARY: Info - 1, Error - 0, Warning - 0, Other - 0"}

    # Строго по порядку: сначала ingestion, потом analytics
    assert [c[1] for c in calls] == ["/ingest", "/summarize"]
    ingest_body = calls[0][2]
    assert ingest_body["message"] == "INFO hi"
    assert ingest_body["level"] == "info"
    assert ingest_body["service"] == "web-dashboard"
    assert "timestamp" in ingest_body
    assert calls[1][0] == "analytics.test"
    assert calls[1][2] == {"logData": "INFO hi"}
    print("[PASS] submit-logs: ingestion -> analytics")


def test_missing_summary_gets_default_text(http, settings):
    handler = lambda request: httpx.Response(200, json={})
    resp = http(use_downstream(settings, handler), "POST", "/submit-logs", json={"logData": "x"})
    assert resp.json() == {"success": True, "summary": "Analysis completed successfully"}


@pytest.mark.parametrize("body", [{}, {"logData": ""}, {"logData": "  \n\t"}, {"logData": ["a"]}])
def test_blank_log_data_is_400(http, settings, body):
    calls = []
    handler = lambda request: calls.append(request) or httpx.Response(200, json={})
    resp = http(use_downstream(settings, handler), "POST", "/submit-logs", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "No log data provided"}
    assert calls == []


@pytest.mark.parametrize("exc_type", [httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadTimeout])
def test_ingestion_unreachable_is_503_and_skips_analytics(http, settings, exc_type):
    """Ingestion недоступен -> 503, analytics не вызывается."""
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        if request.url.path == "/ingest":
            raise exc_type("Connection refused", request=request)
        return httpx.Response(200, json={"summary": "never"})

    resp = http(use_downstream(settings, handler), "POST", "/submit-logs", json={"logData": "INFO x"})
    assert resp.status_code == 503
    assert resp.json() == {"success": False, "error": SERVICES_UNAVAILABLE_MESSAGE}
    assert paths == ["/ingest"]


def test_ingestion_rejection_is_500_and_skips_analytics(http, settings):
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(400, json={"error": "Message is required"})

    resp = http(use_downstream(settings, handler), "POST", "/submit-logs", json={"logData": "INFO x"})
    assert resp.status_code == 500
    data = resp.json()
    assert data["success"] is False
    assert data["error"].startswith("Ingestion service error: 400")
    assert paths == ["/ingest"]


def test_analytics_rejection_is_500(http, settings):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/ingest":
            return httpx.Response(200, json={"success": True, "id": "1"})
        return httpx.Response(500, json={"error": "Failed to generate summary", "summary": None})

    resp = http(use_downstream(settings, handler), "POST", "/submit-logs", json={"logData": "INFO x"})
    assert resp.status_code == 500
    data = resp.json()
    assert data["success"] is False
    assert "summary" not in data
    assert data["error"].startswith("Analytics service error: 500")


def test_analytics_unreachable_is_503(http, settings):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/ingest":
            return httpx.Response(200, json={"success": True, "id": "1"})
        raise httpx.ConnectError("Connection refused", request=request)

    resp = http(use_downstream(settings, handler), "POST", "/submit-logs", json={"logData": "INFO x"})
    assert resp.status_code == 503
    assert resp.json()["success"] is False


def test_non_json_downstream_reply_is_500(http, settings):
    handler = lambda request: httpx.Response(200, text="<html>proxy page</html>")
    resp = http(use_downstream(settings, handler), "POST", "/submit-logs", json={"logData": "INFO x"})
    assert resp.status_code == 500
    assert "invalid JSON response" in resp.json()["error"]


def test_end_to_end_through_real_services(http, settings, store, ingestion_metrics, analytics_metrics, sample_logs):
    """
    Сквозной прогон: gateway -> настоящий ingestion -> настоящий analytics,
    LLM отвечает 503 и сводка строится локально. Оба сервиса пишут в один файл.
    """
    ingestion_main.app.dependency_overrides[get_ingestion_service] = (
        lambda: IngestionService(store, ingestion_metrics)
    )
    summarizer = LLMSummarizer(
        Settings(), analytics_metrics, transport=httpx.MockTransport(lambda r: httpx.Response(503))
    )
    analytics_main.app.dependency_overrides[get_analytics_service] = (
        lambda: AnalyticsService(summarizer, store, analytics_metrics)
    )

    targets = {"ingestion.test": ingestion_main.app, "analytics.test": analytics_main.app}

    async def route(request: httpx.Request) -> httpx.Response:
        target = targets[request.url.host]
        async with httpx.AsyncClient(transport=ASGITransport(app=target), base_url="http://svc") as client:
            reply = await client.request(
                request.method,
                request.url.path,
                content=request.content,
                headers={"content-type": "application/json"},
            )
        return httpx.Response(reply.status_code, content=reply.content, headers={"content-type": "application/json"})

    resp = http(use_downstream(settings, route), "POST", "/submit-logs", json={"logData": sample_logs})
    assert resp.status_code == 200, resp.text
    assert resp.json()["summary"] == generate_fallback_summary(sample_logs)

    records = store.read_all()
    assert len(records) == 2
    assert records[0]["service"] == "web-dashboard"
    assert records[0]["message"] == sample_logs
    assert "timestamp" in records[0]["metadata"]
    assert records[1]["action"] == "summarize"


def test_render_well_formed_report(http, sample_logs):
    report = generate_fallback_summary(sample_logs)
    resp = http(app, "POST", "/render", json={"summary": report})
    assert resp.status_code == 200
    data = resp.json()
    assert data["fallback"] is False
    kinds = [b["kind"] for b in data["blocks"]]
    assert kinds == ["header", "entry", "entry", "entry", "entry"]
    assert [b["severity"] for b in data["blocks"][1:]] == ["info", "error", "warning", "info"]
    assert '<div class="summary-header">' in data["html"]


def test_render_unstructured_text(http):
    resp = http(app, "POST", "/render", json={"summary": "<b>just text</b>"})
    data = resp.json()
    assert data["fallback"] is True
    assert data["blocks"] == [{
        "kind": "raw", "text": "<b>just text</b>", "inspection": None,
        "analysis": None, "action": None, "severity": None,
    }]
    assert "&lt;b&gt;just text&lt;/b&gt;" in data["html"]


def test_health(http, settings):
    app.dependency_overrides[get_settings] = lambda: settings
    resp = http(app, "GET", "/health")
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["service"] == "api-gateway"
    assert data["ingestionUrl"] == "http://ingestion.test:3001"
    assert data["analyticsUrl"] == "http://analytics.test:3002"


def test_submit_logs_lone_surrogate_is_forwarded_replaced(http, settings):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        if request.url.path == "/ingest":
            return httpx.Response(200, json={"success": True, "id": "1"})
        return httpx.Response(200, json={"summary": "ok"})

    resp = http(
        use_downstream(settings, handler), "POST", "/submit-logs",
        content=b'{"logData": "ERROR truncated emoji \\ud83d"}',
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 200, resp.text
    assert seen[0]["message"] == "ERROR truncated emoji �"
    assert seen[1] == {"logData": "ERROR truncated emoji �"}
