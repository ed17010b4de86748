# loglens/api/v1/analytics.py
from fastapi import APIRouter, Depends, Response

from loglens.api.deps import get_analytics_service, get_settings
from loglens.core.config import Settings
from loglens.core.metrics import AnalyticsMetrics, get_analytics_metrics
from loglens.schemas.summaries import AnalyticsHealth, SummarizeRequest, SummarizeResponse
from loglens.services.analytics_service import AnalyticsService

router = APIRouter(tags=["analytics"])


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    summary="Сводка по сырому тексту логов",
    description=(
        "Вызывает внешний LLM; при любой его ошибке сводка строится "
        "локальной эвристикой. Пустой logData -> 400."
    ),
)
async def summarize_logs(
    payload: SummarizeRequest,
    service: AnalyticsService = Depends(get_analytics_service),
) -> SummarizeResponse:
    return await service.summarize(payload.log_data)


@router.get("/health", response_model=AnalyticsHealth, tags=["health"])
async def health_check(settings: Settings = Depends(get_settings)) -> AnalyticsHealth:
    return AnalyticsHealth(groq_configured=settings.groq_configured)


@router.get("/metrics", tags=["metrics"])
async def metrics_endpoint(metrics: AnalyticsMetrics = Depends(get_analytics_metrics)) -> Response:
    return Response(content=metrics.render(), media_type=metrics.content_type)
