# loglens/api/v1/gateway.py
from fastapi import APIRouter, Depends

from loglens.api.deps import get_gateway_service, get_settings
from loglens.core.config import Settings
from loglens.schemas.summaries import (
    GatewayHealth,
    RenderBlockOut,
    RenderRequest,
    RenderResponse,
    SubmitLogsRequest,
    SubmitLogsResponse,
)
from loglens.services.gateway_service import GatewayService
from loglens.services.report_renderer import parse_report, render_html
from loglens.utils.clock import utc_now_iso

router = APIRouter(tags=["gateway"])


@router.post(
    "/submit-logs",
    response_model=SubmitLogsResponse,
    summary="Отправить логи на сохранение и анализ",
)
async def submit_logs(
    payload: SubmitLogsRequest,
    service: GatewayService = Depends(get_gateway_service),
) -> SubmitLogsResponse:
    """
    Сначала ingestion, потом analytics. Недоступный сервис -> 503,
    ответ не 2xx -> 500 с текстом ошибки.
    """
    summary = await service.submit_logs(payload.log_data)
    return SubmitLogsResponse(summary=summary)


@router.post(
    "/render",
    response_model=RenderResponse,
    summary="Разобрать SummaryReport в блоки для отображения",
)
async def render_summary(payload: RenderRequest) -> RenderResponse:
    report = parse_report(payload.summary)
    return RenderResponse(
        blocks=[RenderBlockOut(**vars(block)) for block in report.blocks],
        html=render_html(report),
        fallback=report.fallback,
    )


@router.get("/health", response_model=GatewayHealth, tags=["health"])
async def health_check(settings: Settings = Depends(get_settings)) -> GatewayHealth:
    return GatewayHealth(
        timestamp=utc_now_iso(),
        ingestion_url=settings.ingestion_url,
        analytics_url=settings.analytics_url,
    )
