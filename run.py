# run.py (корень проекта)

import argparse
import os
from dotenv import load_dotenv

# Явно читаем .env
load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env"), encoding="utf-8-sig")

APPS = {
    "gateway": "loglens.api.gateway_main:app",
    "ingestion": "loglens.api.ingestion_main:app",
    "analytics": "loglens.api.analytics_main:app",
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Запуск одного из сервисов пайплайна")
    parser.add_argument("service", choices=sorted(APPS), help="Какой сервис поднять")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=None, help="По умолчанию PORT или порт сервиса")
    parser.add_argument("--reload", action="store_true")
    return parser.parse_args()


if __name__ == "__main__":
    import uvicorn
    from loglens.core.config import Settings

    args = parse_args()
    port = args.port or Settings().port_for(args.service)

    uvicorn.run(
        APPS[args.service],    # <-- строка "модуль:приложение"
        host=args.host,
        port=port,
        log_config=None,       # не переопределяем наш logger
        reload=args.reload,
    )
