#!/usr/bin/env python3
"""Run the Research Portal API with uvicorn.

Usage:
    python scripts/serve.py
    python scripts/serve.py --host 0.0.0.0 --port 9000 --reload
"""

from __future__ import annotations

import argparse

import uvicorn

from research_portal.config.settings import get_settings


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the Research Portal API")
    parser.add_argument("--host", default=settings.api_host)
    parser.add_argument("--port", type=int, default=settings.api_port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args(argv)

    uvicorn.run(
        "research_portal.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
