from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from typing import Optional
from urllib.parse import quote

from sudokupad_relay.config import Settings, get_settings
from sudokupad_relay.protocol.messages import UserInfo

from .relay import Relay, RelaySettings, downstream_channel
from .upload import BLANK_PUZZLE, upload_puzzle

log = logging.getLogger(__name__)

# what encodeURIComponent leaves alone besides quote()'s defaults
_URI_SAFE = "!*'()"


class RelaySlot:
    """Holds the one active relay; installing a new one tears down the old."""

    def __init__(self) -> None:
        self._relay: Optional[Relay] = None
        # one swap at a time, so a relay still starting is never left behind
        self._lock = asyncio.Lock()

    @property
    def current(self) -> Optional[Relay]:
        return self._relay

    async def replace(self, relay: Relay) -> bool:
        """Swap in `relay`; returns whether both of its channels opened."""
        async with self._lock:
            previous, self._relay = self._relay, relay
            if previous is not None:
                await previous.disconnect()
            return await relay.start()

    async def clear(self) -> None:
        async with self._lock:
            previous, self._relay = self._relay, None
            if previous is not None:
                await previous.disconnect()


def random_user_id() -> str:
    return str(random.randrange(1_000_000))


def build_view_url(room_id: str, user_info: UserInfo, settings: Optional[Settings] = None) -> str:
    """URL of the user's private view, for embedding."""
    settings = settings or get_settings()
    key = quote(user_info.key, safe=_URI_SAFE)
    name = quote(user_info.name, safe=_URI_SAFE)
    color = quote(user_info.color, safe=_URI_SAFE)
    return (
        settings.base_url
        + settings.channel_prefix
        + downstream_channel(room_id, user_info)
        + f"?setting-nopauseonstart=1&setting-streamtool=1&hostkey={key}&hostname={name}&hostcolor={color}"
    )


async def connect(
    slot: RelaySlot,
    room_id: str,
    user_info: UserInfo,
    relay_settings: Optional[RelaySettings] = None,
    *,
    settings: Optional[Settings] = None,
    relay_factory: Callable[..., Relay] = Relay,
) -> tuple[str, bool]:
    """
    Seed both channels, swap in a fresh relay and return the view URL plus
    whether both channels opened.

    Upload failures are logged but don't stop the connect; the channel may
    still exist from an earlier run.
    """
    settings = settings or get_settings()
    for short_id in (room_id, downstream_channel(room_id, user_info)):
        if not await upload_puzzle(BLANK_PUZZLE, short_id, settings=settings):
            log.warning("could not seed %s, connecting anyway", short_id)
    connected = await slot.replace(relay_factory(room_id, user_info, relay_settings))
    return build_view_url(room_id, user_info, settings), connected
