from __future__ import annotations

import logging

import uvicorn
from dotenv import load_dotenv

load_dotenv()  # Load .env file

from src.api.app import create_app
from src.app.logging import setup_logging
from src.app.settings import load_settings

logger = logging.getLogger("almas.server")


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)

    app = create_app(settings)
    logger.info(
        "server starting",
        extra={"fields": {"host": settings.host, "port": settings.port, "store": settings.store_backend}},
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
