# loglens/repos/log_store.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from loglens.utils.text import scrub_surrogates

logger = logging.getLogger("repos.log_store")


def serialize_record(record: Mapping[str, Any]) -> str:
    """Одна запись -> одна компактная JSON-строка без перевода строки."""
    return json.dumps(scrub_surrogates(dict(record)), ensure_ascii=False, separators=(",", ":"))


class LogStore:
    """
    Append-only NDJSON-файл, общий для ingestion и analytics.

    Без блокировок, ротации и индексов: каждая запись дописывается
    одним вызовом write() в режиме "a". Чтение всегда полное.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def directory_exists(self) -> bool:
        return self.path.parent.is_dir()

    def ensure_directory(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: Mapping[str, Any]) -> str:
        """
        Дописывает запись строкой в конец файла.

        Returns:
            str: записанная JSON-строка (без "\\n"), нужна для метрики размера.
        """
        line = serialize_record(record)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")
        return line

    def read_all(self) -> List[Dict[str, Any]]:
        """
        Читает и парсит все непустые строки файла в порядке записи.

        Отсутствующий файл -> []. Битая строка валит всё чтение (ValueError).
        """
        if not self.path.exists():
            return []

        records: List[Dict[str, Any]] = []
        with self.path.open("r", encoding="utf-8") as fh:
            for lineno, raw in enumerate(fh, start=1):
                line = raw.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    logger.error("Malformed record at %s:%d", self.path, lineno)
                    raise
                if not isinstance(record, dict):
                    logger.error("Non-object record at %s:%d", self.path, lineno)
                    raise ValueError(f"Record at line {lineno} is not a JSON object")
                records.append(record)
        return records

    def line_count(self) -> int:
        if not self.path.exists():
            return 0
        with self.path.open("r", encoding="utf-8") as fh:
            return sum(1 for raw in fh if raw.strip())
