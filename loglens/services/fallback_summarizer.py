# loglens/services/fallback_summarizer.py
"""
Локальная эвристическая сводка по логам.

Используется, когда внешний LLM недоступен. Формат вывода совпадает
с тем, что просим у модели, поэтому фронт рендерит оба одинаково:

    SUMMARY: Info - N, Error - N, Warning - N, Other - N

    LOG ANALYSIS:
    🔍 Log 1: <строка>
    📝 Analysis: <текст>
    💡 Action: <текст>
"""
from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import List, Optional

INSPECTION_MARKER = "🔍"
ANALYSIS_MARKER = "📝"
ACTION_MARKER = "💡"
SUMMARY_PREFIX = "SUMMARY:"
SECTION_HEADER = "LOG ANALYSIS:"


class LogCategory(str, Enum):
    INFO = "Info"
    ERROR = "Error"
    WARNING = "Warning"
    OTHER = "Other"


# Порядок важен: первая совпавшая категория выигрывает
_KEYWORDS = (
    (LogCategory.ERROR, ("error", "fail", "exception")),
    (LogCategory.WARNING, ("warn",)),
    (LogCategory.INFO, ("info", "success")),
)

# Порядок счётчиков в заголовке
HEADER_ORDER = (LogCategory.INFO, LogCategory.ERROR, LogCategory.WARNING, LogCategory.OTHER)

_ANNOTATIONS = {
    LogCategory.ERROR: (
        "Error detected - system issue requiring attention",
        "Investigate the error cause and implement fix",
    ),
    LogCategory.WARNING: (
        "Warning message - potential issue to monitor",
        "Monitor this condition and consider preventive measures",
    ),
    LogCategory.INFO: (
        "Informational message - normal system operation",
        "No action needed",
    ),
    LogCategory.OTHER: (
        "Debug or trace message - normal system logging",
        "No action needed",
    ),
}


def split_log_lines(log_data: Optional[str]) -> List[str]:
    """Логические строки: непустые после strip сегменты по "\\n", в исходном порядке."""
    if not log_data:
        return []
    return [line.rstrip("\r") for line in log_data.split("\n") if line.strip()]


def classify_line(line: str) -> LogCategory:
    lowered = line.lower()
    for category, keywords in _KEYWORDS:
        if any(word in lowered for word in keywords):
            return category
    return LogCategory.OTHER


def format_header(counts: Counter) -> str:
    parts = ", ".join(f"{category.value} - {counts.get(category, 0)}" for category in HEADER_ORDER)
    return f"{SUMMARY_PREFIX} {parts}"


def generate_fallback_summary(log_data: Optional[str]) -> str:
    """
    Строит SummaryReport без внешних вызовов. Никогда не бросает исключений,
    один и тот же вход всегда даёт один и тот же выход.
    """
    if not isinstance(log_data, str):
        log_data = "" if log_data is None else str(log_data)

    lines = split_log_lines(log_data)
    categories = [classify_line(line) for line in lines]
    counts = Counter(categories)

    out = [format_header(counts), "", SECTION_HEADER]
    for index, (line, category) in enumerate(zip(lines, categories), start=1):
        analysis, action = _ANNOTATIONS[category]
        out.append(f"{INSPECTION_MARKER} Log {index}: {line}")
        out.append(f"{ANALYSIS_MARKER} Analysis: {analysis}")
        out.append(f"{ACTION_MARKER} Action: {action}")
        out.append("")

    return "\n".join(out) + "\n"
