"""Entry point for running the bookmark API."""

import logging
import os

import uvicorn

from core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    host = os.getenv("HOST", "127.0.0.1")
    # PORT for PaaS platforms (Railway, Heroku, etc.)
    port = int(os.getenv("PORT") or "3001")

    uvicorn.run(
        "api.main:app",
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )
