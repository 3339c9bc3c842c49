from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Optional

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from sudokupad_relay.protocol.cells import CellParseError, format_cells
from sudokupad_relay.protocol.constants import (
    A_SELECT,
    C_ACT,
    C_CLONEVIEW,
    C_CLOSEDIALOG,
    C_MARKCELL,
    C_POINTER,
    CLEAR_POINTER_XY,
)
from sudokupad_relay.protocol.messages import (
    Act,
    CloneView,
    CloseDialog,
    MarkCell,
    Message,
    MessageError,
    Pointer,
    UserInfo,
    dump_message,
    parse_message,
)
from sudokupad_relay.protocol.subcommands import AddSelection, ClearSelection, RemoveSelection, parse_act

log = logging.getLogger(__name__)

OnMessage = Callable[[Message], None]

S_NEW = "new"
S_OPEN = "open"
S_CLOSED = "closed"


def channel_ws_url(base_url: str, channel_prefix: str, channel_id: str) -> str:
    url = base_url + channel_prefix + channel_id
    if url.startswith("https://"):
        return "wss://" + url[len("https://"):]
    if url.startswith("http://"):
        return "ws://" + url[len("http://"):]
    return url


class Connection:
    """
    One websocket to a named channel, plus the channel's selection as
    observed from the traffic we send and receive.

    Inbound messages are handled in arrival order by a reader task.
    `send()` never blocks: it queues the encoded message for a writer task,
    so frames go out in call order.
    """

    def __init__(
        self,
        channel_id: str,
        user_info: UserInfo,
        on_message: OnMessage,
        *,
        base_url: str = "https://sudokupad.app/",
        channel_prefix: str = "sudokucon/",
        connect: Callable[..., Any] = websockets.connect,
        debug_log_msgs: bool = False,
    ):
        self.channel_id = channel_id
        self.user_info = user_info
        self.on_message = on_message
        self.url = channel_ws_url(base_url, channel_prefix, channel_id)
        self.state = S_NEW
        # dict keys: a set that keeps insertion order for serialization
        self.selection: dict[str, None] = {}
        self._connect = connect
        self._debug = debug_log_msgs
        self._ws: Any = None
        self._outbox: asyncio.Queue[str] = asyncio.Queue()
        self._reader: Optional[asyncio.Task[None]] = None
        self._writer: Optional[asyncio.Task[None]] = None

    @property
    def is_open(self) -> bool:
        return self.state == S_OPEN

    async def open(self) -> bool:
        if self.state != S_NEW:
            log.error("%s can't open in state %s", self.channel_id, self.state)
            return False
        try:
            ws = await self._connect(self.url, max_size=2**22)
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            log.error("%s WS connect failed: %r", self.channel_id, e)
            self.state = S_CLOSED
            return False
        if self.state == S_CLOSED:
            # closed while the handshake was in flight
            log.info("%s WS closed before open completed", self.channel_id)
            try:
                await ws.close()
            except (OSError, WebSocketException) as e:
                log.error("%s WS close failed: %r", self.channel_id, e)
            return False
        self._ws = ws

        log.info("%s WS open", self.channel_id)
        self.state = S_OPEN
        self._writer = asyncio.create_task(self._write_loop())
        self.send(
            CloneView(
                cmd=C_CLONEVIEW,
                hostkey=self.user_info.key,
                hostname=self.user_info.name + " proxy",
                hostcolor=self.user_info.color,
            )
        )
        self._reader = asyncio.create_task(self._read_loop())
        return True

    async def close(self) -> None:
        if self._ws is None:
            self.state = S_CLOSED
            return
        self.state = S_CLOSED
        # Whatever was queued before close still goes out.
        if self._writer is not None and not self._writer.done():
            await self._outbox.join()
        for task in (self._reader, self._writer):
            if task is not None and task is not asyncio.current_task():
                task.cancel()
        try:
            await self._ws.close()
        except (OSError, WebSocketException) as e:
            log.error("%s WS close failed: %r", self.channel_id, e)
        self._ws = None

    async def flush(self) -> None:
        """Wait until every queued message has been handed to the transport."""
        if self._writer is not None and not self._writer.done():
            await self._outbox.join()

    async def wait_closed(self) -> None:
        if self._reader is not None:
            try:
                await self._reader
            except asyncio.CancelledError:
                pass

    async def _read_loop(self) -> None:
        try:
            async for raw in self._ws:
                if isinstance(raw, bytes):
                    raw = raw.decode("utf-8", errors="replace")
                self.handle_raw(raw)
        except ConnectionClosed as e:
            log.info("%s WS close: %s", self.channel_id, e)
        except (OSError, WebSocketException) as e:
            log.error("%s WS error: %r", self.channel_id, e)
        else:
            log.info("%s WS close", self.channel_id)
        self.state = S_CLOSED

    async def _write_loop(self) -> None:
        while True:
            data = await self._outbox.get()
            try:
                await self._ws.send(data)
            except (OSError, WebSocketException) as e:
                log.error("%s failed to send message: %r", self.channel_id, e)
                self.state = S_CLOSED
            finally:
                self._outbox.task_done()

    def handle_raw(self, raw: str) -> None:
        try:
            msg = parse_message(raw)
        except MessageError as e:
            log.error("%s failed to parse message: %s", self.channel_id, e)
            return
        if self._debug:
            log.debug("[%s] in %r", self.channel_id, msg)
        self.update_selection(msg)
        try:
            self.on_message(msg)
        except Exception:
            log.exception("%s message handler failed", self.channel_id)

    def update_selection(self, msg: Message) -> None:
        if not isinstance(msg, Act):
            return
        sub = parse_act(msg.act)
        try:
            if isinstance(sub, AddSelection):
                for cell in sub.cells():
                    self.selection[cell] = None
            elif isinstance(sub, RemoveSelection):
                for cell in sub.cells():
                    self.selection.pop(cell, None)
            elif isinstance(sub, ClearSelection):
                self.selection.clear()
        except CellParseError as e:
            log.warning("%s ignoring selection update %r: %s", self.channel_id, msg.act, e)

    def get_selection_string(self) -> str:
        return format_cells(self.selection)

    def send(self, msg: Message) -> bool:
        self.update_selection(msg)
        if self.state != S_OPEN:
            log.error("%s can't send message in state %s", self.channel_id, self.state)
            return False
        if self._debug:
            log.debug("[%s] out %r", self.channel_id, msg)
        self._outbox.put_nowait(dump_message(msg))
        return True

    def send_pointer(self, x: float, y: float, host: Any = None) -> bool:
        return self.send(Pointer(cmd=C_POINTER, x=x, y=y, host=host))

    def send_clear_pointer(self, host: Any = None) -> bool:
        return self.send_pointer(CLEAR_POINTER_XY, CLEAR_POINTER_XY, host)

    def send_act(self, seq: Optional[int], act: str) -> bool:
        return self.send(Act(cmd=C_ACT, seq=seq, act=act))

    def send_sync_request(self) -> bool:
        # An empty set-selection makes the session broadcast its full state.
        return self.send_act(0, A_SELECT)

    def send_mark_cell(self, cell: str) -> bool:
        return self.send(MarkCell(cmd=C_MARKCELL, cell=cell))

    def send_close_dialog(self) -> bool:
        return self.send(CloseDialog(cmd=C_CLOSEDIALOG))

    def mark_selection(self) -> None:
        """Flash every cell we think is selected; handy for spotting desyncs."""
        for cell in list(self.selection):
            self.send_mark_cell(cell)
