# loglens/services/report_renderer.py
"""
Разбор SummaryReport в визуальные блоки для отображения клиенту.

Парсер терпим к любому входу: если в тексте не нашлось ни заголовка,
ни блоков 🔍/📝/💡, весь текст отдаётся одним raw-блоком как есть.
"""
from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any, List, Optional

from loglens.services.fallback_summarizer import (
    ACTION_MARKER,
    ANALYSIS_MARKER,
    INSPECTION_MARKER,
    SECTION_HEADER,
    SUMMARY_PREFIX,
)


@dataclass
class ReportBlock:
    kind: str                      # header | entry | raw
    text: Optional[str] = None
    inspection: Optional[str] = None
    analysis: Optional[str] = None
    action: Optional[str] = None
    severity: Optional[str] = None


@dataclass
class RenderedReport:
    blocks: List[ReportBlock] = field(default_factory=list)
    fallback: bool = False


def action_severity(action_line: str) -> str:
    lowered = action_line.lower()
    if "investigate" in lowered or "fix" in lowered:
        return "error"
    if "monitor" in lowered or "warning" in lowered:
        return "warning"
    return "info"


def parse_report(summary: Any) -> RenderedReport:
    if summary is None:
        summary = ""
    elif not isinstance(summary, str):
        summary = str(summary)

    blocks: List[ReportBlock] = []
    current: Optional[ReportBlock] = None

    for raw in summary.split("\n"):
        line = raw.strip()
        if not line:
            continue

        if line.startswith(SUMMARY_PREFIX):
            blocks.append(ReportBlock(kind="header", text=line))
        elif line.startswith(SECTION_HEADER):
            continue
        elif line.startswith(INSPECTION_MARKER):
            current = ReportBlock(kind="entry", inspection=line)
            blocks.append(current)
        elif current is not None and line.startswith(ANALYSIS_MARKER):
            current.analysis = line
        elif current is not None and line.startswith(ACTION_MARKER):
            current.action = line
            current.severity = action_severity(line)

    if not blocks:
        return RenderedReport(blocks=[ReportBlock(kind="raw", text=summary)], fallback=True)
    return RenderedReport(blocks=blocks)


def render_html(report: RenderedReport) -> str:
    """HTML-разметка под стили дашборда; весь текст экранируется."""
    parts: List[str] = []
    for block in report.blocks:
        if block.kind == "header":
            parts.append(f'<div class="summary-header">{html.escape(block.text or "")}</div>')
        elif block.kind == "entry":
            inner = [f'<div class="log-line">{html.escape(block.inspection or "")}</div>']
            if block.analysis is not None:
                inner.append(f'<div class="log-analysis">{html.escape(block.analysis)}</div>')
            if block.action is not None:
                inner.append(
                    f'<div class="log-action {block.severity}">{html.escape(block.action)}</div>'
                )
            parts.append(f'<div class="log-entry">{"".join(inner)}</div>')
        else:
            parts.append(f'<div style="white-space: pre-wrap;">{html.escape(block.text or "")}</div>')
    return "".join(parts)
