# loglens/core/config.py

import os


GROQ_KEY_PLACEHOLDERS = ("", "apikey-your-groq-api-key", "your-groq-api-key")

DEFAULT_PORTS = {
    "gateway": 3000,
    "ingestion": 3001,
    "analytics": 3002,
}


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be a number, got {raw!r}")


class Settings:
    """
    Конфигурация сервисов пайплайна:
    всё берётся напрямую из os.environ (.env подгружает run.py).
    Обязательных переменных нет, у всех есть дефолты.
    """
    def __init__(self):
        self.log_level: str = os.environ.get("LOG_LEVEL", "INFO")
        self.log_dir: str = os.environ.get("LOG_DIR", "logs")

        # Общий NDJSON-файл, в который пишут ingestion и analytics
        self.log_store_path: str = os.environ.get(
            "LOG_STORE_PATH", os.path.join("shared", "logs", "logs.jsonl")
        )

        # Внешний LLM (Groq, OpenAI-совместимый chat/completions)
        self.groq_api_key: str = os.environ.get("GROQ_API_KEY", "")
        self.groq_api_url: str = os.environ.get(
            "GROQ_API_URL", "https://api.groq.com/openai/v1/chat/completions"
        )
        self.groq_model: str = os.environ.get("GROQ_MODEL", "llama3-8b-8192")
        self.groq_timeout: float = _env_float("GROQ_TIMEOUT_SECONDS", 25.0)

        # Адреса соседних сервисов для gateway
        self.ingestion_url: str = os.environ.get(
            "INGESTION_URL", "http://localhost:3001"
        ).rstrip("/")
        self.analytics_url: str = os.environ.get(
            "ANALYTICS_URL", "http://localhost:3002"
        ).rstrip("/")
        self.downstream_timeout: float = _env_float("DOWNSTREAM_TIMEOUT_SECONDS", 30.0)

    @property
    def groq_configured(self) -> bool:
        return self.groq_api_key not in GROQ_KEY_PLACEHOLDERS

    def port_for(self, service: str) -> int:
        """
        Порт сервиса: PORT из окружения, иначе дефолт по имени сервиса.
        """
        raw = os.environ.get("PORT")
        if raw:
            try:
                return int(raw)
            except ValueError:
                raise RuntimeError(f"PORT must be an integer, got {raw!r}")
        try:
            return DEFAULT_PORTS[service]
        except KeyError as e:
            raise RuntimeError(f"Unknown service: {e}")
