from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from sudokupad_relay.config import Settings, get_settings
from sudokupad_relay.protocol.messages import UserInfo
from sudokupad_relay.relay.manager import RelaySlot, connect, random_user_id
from sudokupad_relay.relay.relay import Relay, RelaySettings

from .page import render_index_html

log = logging.getLogger(__name__)


class ConnectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId", min_length=1)
    name: str
    color: str
    key: str = "1"
    # absent on a fresh join; the stored one is sent back when reconnecting
    user_id: Optional[str] = Field(default=None, alias="userId")


class SettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    send_pointer: Optional[bool] = Field(default=None, alias="sendPointer")
    show_pointers: Optional[bool] = Field(default=None, alias="showPointers")


def create_app(
    settings: Optional[Settings] = None,
    relay_factory: Callable[..., Relay] = Relay,
) -> FastAPI:
    settings = settings or get_settings()
    slot = RelaySlot()
    # One policy object shared by every relay this app creates, so toggles survive reconnects.
    relay_settings = RelaySettings(send_pointer=settings.send_pointer, show_pointers=settings.show_pointers)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await slot.clear()

    app = FastAPI(lifespan=lifespan)
    app.state.slot = slot
    app.state.relay_settings = relay_settings

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    @app.get("/", response_class=HTMLResponse)
    def index():
        return HTMLResponse(render_index_html())

    @app.post("/api/connect")
    async def api_connect(req: ConnectRequest):
        user_info = UserInfo(key=req.key, name=req.name, color=req.color, user_id=req.user_id or random_user_id())
        log.info("connecting %s to room %s", user_info.name, req.room_id)
        url, connected = await connect(slot, req.room_id, user_info, relay_settings, settings=settings, relay_factory=relay_factory)
        return {"url": url, "connected": connected, "userInfo": user_info.model_dump(by_alias=True)}

    @app.post("/api/ready")
    async def api_ready():
        relay = slot.current
        if relay is None:
            return {"ok": False}
        return {"ok": relay.request_sync()}

    @app.get("/api/settings")
    def api_get_settings():
        return relay_settings.model_dump(by_alias=True)

    @app.post("/api/settings")
    async def api_update_settings(update: SettingsUpdate):
        for name, value in update.model_dump(exclude_none=True).items():
            setattr(relay_settings, name, value)
        return relay_settings.model_dump(by_alias=True)

    @app.post("/api/disconnect")
    async def api_disconnect():
        await slot.clear()
        return {"ok": True}

    @app.post("/api/mark-selections")
    async def api_mark_selections():
        relay = slot.current
        if relay is None:
            return {"ok": False}
        relay.mark_selections()
        return {"ok": True}

    return app


app = create_app()
