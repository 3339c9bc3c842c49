from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from sudokupad_relay.config import Settings, get_settings
from sudokupad_relay.protocol.constants import A_CLEAR, A_GROUP_END, A_GROUP_START, A_SELECT
from sudokupad_relay.protocol.messages import Act, Message, Pointer, Sync, UserInfo
from sudokupad_relay.protocol.subcommands import Redo, Undo, is_selection_change, parse_act

from .connection import Connection, OnMessage

log = logging.getLogger(__name__)

ConnectionFactory = Callable[[str, UserInfo, OnMessage], Connection]


class RelaySettings(BaseModel):
    """Pointer policy; the owning app may flip either flag at any time."""

    model_config = ConfigDict(populate_by_name=True)

    send_pointer: bool = Field(default=True, alias="sendPointer")
    show_pointers: bool = Field(default=True, alias="showPointers")


def downstream_channel(room_id: str, user_info: UserInfo) -> str:
    return f"{room_id}_{user_info.user_id}"


def default_connection_factory(settings: Settings) -> ConnectionFactory:
    return partial(
        Connection,
        base_url=settings.base_url,
        channel_prefix=settings.channel_prefix,
        debug_log_msgs=settings.debug_log_msgs,
    )


class Relay:
    """
    Couples a user's private view (downstream) with the shared room
    (upstream).

    Everything except selection is shared. Selection changes are swallowed
    in both directions (replaced by an empty `sl:` so `seq` still flows), and
    edits are replayed on the other side against the selection of the side
    that made them, then the receiving side's selection is put back.
    """

    def __init__(
        self,
        room_id: str,
        user_info: UserInfo,
        settings: Optional[RelaySettings] = None,
        *,
        connection_factory: Optional[ConnectionFactory] = None,
    ):
        self.room_id = room_id
        self.user_info = user_info
        self.settings = settings or RelaySettings()
        self.active = True
        factory = connection_factory or default_connection_factory(get_settings())
        self.downstream = factory(downstream_channel(room_id, user_info), user_info, self._on_downstream)
        self.upstream = factory(room_id, user_info, self._on_upstream)

    async def start(self) -> bool:
        """Open both channels; False if either failed or the relay was disconnected meanwhile."""
        down_ok = await self.downstream.open()
        up_ok = self.active and await self.upstream.open()
        if not self.active:
            await self.upstream.close()
            await self.downstream.close()
            return False
        if not (down_ok and up_ok):
            log.warning(
                "relay for room %s started degraded: downstream %s, upstream %s",
                self.room_id,
                "open" if down_ok else "failed",
                "open" if up_ok else "failed",
            )
        return down_ok and up_ok

    def request_sync(self) -> bool:
        """Ask the shared room to broadcast its full state (e.g. after the view reloads)."""
        if not self.active:
            return False
        return self.upstream.send_sync_request()

    def mark_selections(self) -> None:
        self.upstream.mark_selection()
        self.downstream.mark_selection()

    async def disconnect(self) -> None:
        if not self.active:
            return
        self.active = False
        # tell other players to remove our pointer
        self.upstream.send_clear_pointer({"name": self.user_info.name})
        await self.upstream.close()
        await self.downstream.close()
        log.info("relay for room %s disconnected", self.room_id)

    def _on_downstream(self, msg: Message) -> None:
        if not self.active:
            return
        if isinstance(msg, Pointer) and not self.settings.send_pointer:
            return

        seq = getattr(msg, "seq", None)
        if isinstance(seq, int):
            msg.seq = seq + 1

        up = self.upstream
        if not isinstance(msg, Act):
            up.send(msg)
            return

        sub = parse_act(msg.act)
        if isinstance(sub, (Undo, Redo)):
            # Undo histories differ per side; resync from the room instead.
            self.downstream.send_sync_request()
        elif is_selection_change(sub):
            # no-op that still carries seq
            up.send_act(msg.seq, A_SELECT)
        else:
            # Grouped so other clients can undo this atomically
            up.send_act(msg.seq, A_GROUP_START)
            up.send_act(msg.seq, A_CLEAR)
            up.send_act(msg.seq, A_SELECT + self.downstream.get_selection_string())
            up.send(msg)
            up.send_act(msg.seq, A_CLEAR)
            up.send_act(msg.seq, A_GROUP_END)

    def _on_upstream(self, msg: Message) -> None:
        if not self.active:
            return
        if isinstance(msg, Pointer) and not self.settings.show_pointers:
            return

        down = self.downstream
        if isinstance(msg, Act):
            if is_selection_change(parse_act(msg.act)):
                down.send_act(msg.seq, A_SELECT)
                return
            # Not grouped: we may already be inside a group and groups don't nest.
            saved = down.get_selection_string()
            down.send_act(msg.seq, A_CLEAR)
            down.send_act(msg.seq, A_SELECT + self.upstream.get_selection_string())
            down.send(msg)
            down.send_act(msg.seq, A_CLEAR)
            down.send_act(msg.seq, A_SELECT + saved)
        elif isinstance(msg, Sync):
            # A snapshot clobbers selection; put ours back afterwards.
            saved = down.get_selection_string()
            down.send(msg)
            down.send_act(msg.seq, A_CLEAR)
            down.send_act(msg.seq, A_SELECT + saved)
        else:
            down.send(msg)
