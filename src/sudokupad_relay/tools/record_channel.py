from __future__ import annotations

import argparse
import asyncio
import json
import logging
import time
from pathlib import Path

from sudokupad_relay.config import get_settings
from sudokupad_relay.logger import setup_logging
from sudokupad_relay.protocol.messages import Message, UserInfo, message_to_dict
from sudokupad_relay.relay.connection import Connection

log = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


async def record(channel: str, out_path: Path, *, name: str, echo: bool, connect=None) -> None:
    """Append every message seen on `channel` to `out_path` as `{"ts", "msg"}` lines."""
    settings = get_settings()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("a", encoding="utf-8") as f:

        def on_message(msg: Message) -> None:
            data = message_to_dict(msg)
            if echo:
                print(f"[record] cmd={data.get('cmd')} msg={data}")
            f.write(json.dumps({"ts": _now_ms(), "msg": data}, ensure_ascii=False) + "\n")
            f.flush()

        kwargs = {"connect": connect} if connect is not None else {}
        conn = Connection(
            channel,
            UserInfo(name=name, color="#888888", user_id="recorder"),
            on_message,
            base_url=settings.base_url,
            channel_prefix=settings.channel_prefix,
            **kwargs,
        )
        if not await conn.open():
            return
        try:
            await conn.wait_closed()
        finally:
            await conn.close()


def main() -> None:
    ap = argparse.ArgumentParser(description="Record a channel's traffic to a JSONL file.")
    ap.add_argument("--channel", required=True, help="Channel id, e.g. myroom or myroom_123456")
    ap.add_argument("--out", required=True, help="Output JSONL path")
    ap.add_argument("--name", default="recorder", help="Display name announced to the channel")
    ap.add_argument("--print", action="store_true", help="Print received messages to stdout")
    args = ap.parse_args()

    setup_logging(get_settings().log_level)
    try:
        asyncio.run(record(args.channel, Path(args.out), name=args.name, echo=args.print))
    except KeyboardInterrupt:
        log.info("stopped")


if __name__ == "__main__":
    main()
