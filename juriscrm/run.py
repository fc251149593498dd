#!/usr/bin/env python3
"""
Runner for the Hearing Desk API
===============================

Binds to API_HOST / API_PORT (default 0.0.0.0:8000).

Usage:
    python -m juriscrm.run
    API_RELOAD=true python -m juriscrm.run
"""

import uvicorn

from juriscrm.config import get_settings


def main() -> None:
    settings = get_settings()
    print(f"Starting JurisCRM Hearing Desk on {settings.api_host}:{settings.api_port} ({settings.storage_backend} storage)")
    print(f"API docs: http://localhost:{settings.api_port}/docs")

    uvicorn.run(
        "juriscrm.api:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
