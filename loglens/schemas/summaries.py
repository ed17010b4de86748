"""
Pydantic-схемы analytics и gateway: /summarize, /submit-logs, /render.

Внешний контракт в camelCase (logData, inputLength, ...),
внутри используются snake_case имена через alias.
"""
from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from loglens.schemas.logs import TextPayload


# ----- Analytics -----

class SummarizeRequest(TextPayload):
    model_config = ConfigDict(populate_by_name=True)

    # Any: нестроковое значение -> 400 из сервиса, а не 422
    log_data: Any = Field(default=None, alias="logData")


SummarySource = Literal["llm", "fallback"]


class SummaryMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    input_length: int = Field(..., alias="inputLength")
    output_length: int = Field(..., alias="outputLength")
    timestamp: str
    model: str = "groq-llama3"
    source: SummarySource = Field(..., description="llm: ответ внешнего API, fallback: локальная эвристика")


class SummarizeResponse(BaseModel):
    summary: str
    metadata: SummaryMetadata


class AnalyticsHealth(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "healthy"
    service: str = "ai-summarizer"
    groq_configured: bool = Field(..., alias="groqConfigured")


# ----- Gateway -----

class SubmitLogsRequest(TextPayload):
    model_config = ConfigDict(populate_by_name=True)

    log_data: Any = Field(default=None, alias="logData")


class SubmitLogsResponse(BaseModel):
    success: bool = True
    summary: str


class RenderRequest(TextPayload):
    summary: Any = None


RenderBlockKind = Literal["header", "entry", "raw"]
Severity = Literal["error", "warning", "info"]


class RenderBlockOut(BaseModel):
    kind: RenderBlockKind
    text: Optional[str] = None
    inspection: Optional[str] = None
    analysis: Optional[str] = None
    action: Optional[str] = None
    severity: Optional[Severity] = None


class RenderResponse(BaseModel):
    blocks: List[RenderBlockOut]
    html: str
    fallback: bool


class GatewayHealth(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "healthy"
    service: str = "api-gateway"
    timestamp: str
    ingestion_url: str = Field(..., alias="ingestionUrl")
    analytics_url: str = Field(..., alias="analyticsUrl")
