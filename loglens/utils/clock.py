# loglens/utils/clock.py
from datetime import datetime, timezone


def utc_now_iso() -> str:
    """ISO-8601 UTC с миллисекундами и суффиксом Z (как toISOString в браузере)."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
