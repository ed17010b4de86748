# loglens/utils/text.py
from typing import Any


def scrub_surrogates(value: Any) -> Any:
    """
    Заменяет непарные UTF-16 суррогаты на U+FFFD.

    JSON допускает "\\ud83d" без пары, json.loads превращает его в str,
    который нельзя записать в UTF-8. Обходит dict/list рекурсивно,
    остальные значения возвращает как есть.
    """
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return value.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
        return value
    if isinstance(value, dict):
        return {scrub_surrogates(k): scrub_surrogates(v) for k, v in value.items()}
    if isinstance(value, list):
        return [scrub_surrogates(v) for v in value]
    return value
