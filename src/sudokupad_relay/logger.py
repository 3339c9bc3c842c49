from __future__ import annotations

import logging
import os

import websockets
from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install

console = Console(stderr=True)


def setup_logging(level: str | None = None) -> None:
    """Route all logging through rich; `LOGLEVEL` wins over `level`."""
    handler = RichHandler(
        level=os.environ.get("LOGLEVEL", level or "INFO"),
        console=console,
        rich_tracebacks=True,
        tracebacks_suppress=[websockets],
    )

    logging.basicConfig(level="NOTSET", format="%(message)s", datefmt="[%X]", handlers=[handler])

    install(console=console)
