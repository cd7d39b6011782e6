"""Serve the upload gateway with uvicorn: ``python -m upload_gateway``."""

from __future__ import annotations

import argparse
import sys

import uvicorn

APP_IMPORT_PATH = "upload_gateway.main:app"


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the media upload gateway HTTP server.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development).")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    # logging is configured by create_app; keep uvicorn from installing its own
    uvicorn.run(
        APP_IMPORT_PATH,
        host=args.host,
        port=args.port,
        workers=args.workers,
        reload=args.reload,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
