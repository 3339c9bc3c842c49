from __future__ import annotations

import argparse

import uvicorn

from .config import get_settings
from .logger import setup_logging


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Serve the relay page and control API.")
    ap.add_argument("--host", default=settings.host, help="Bind address")
    ap.add_argument("--port", type=int, default=settings.port, help="Bind port")
    ap.add_argument("--log-level", default=settings.log_level, help="DEBUG, INFO, WARNING, ...")
    args = ap.parse_args()

    setup_logging(args.log_level)
    uvicorn.run("sudokupad_relay.server.app:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
