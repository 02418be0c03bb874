from __future__ import annotations

import logging
import os

import uvicorn

from portal.config import settings


def _quiet_logging() -> None:
    # Root defaults
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(levelname)s:%(name)s:%(message)s",
    )

    # Quiet the usual offenders
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def main() -> None:
    _quiet_logging()
    port = int(os.getenv("API_PORT", "3001"))
    logging.getLogger(__name__).info("Listings gateway starting on :%d", port)
    uvicorn.run("portal.main:app", host="0.0.0.0", port=port, log_config=None)


if __name__ == "__main__":
    main()
