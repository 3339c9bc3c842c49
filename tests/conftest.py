import asyncio
import json
from functools import partial

import pytest

from sudokupad_relay.protocol.messages import UserInfo
from sudokupad_relay.relay.connection import Connection


class FakeWebSocket:
    """Stands in for a websockets client connection."""

    def __init__(self, url: str):
        self.url = url
        self.sent: list[str] = []
        self.closed = False
        self._incoming: asyncio.Queue = asyncio.Queue()

    async def send(self, data: str) -> None:
        self.sent.append(data)

    async def close(self) -> None:
        self.closed = True
        await self._incoming.put(None)

    def feed(self, data) -> None:
        self._incoming.put_nowait(data)

    def sent_messages(self) -> list[dict]:
        return [json.loads(s) for s in self.sent]

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self._incoming.get()
        if item is None:
            raise StopAsyncIteration
        return item


class FakeConnector:
    def __init__(self):
        self.sockets: list[FakeWebSocket] = []

    async def __call__(self, url: str, **kwargs) -> FakeWebSocket:
        ws = FakeWebSocket(url)
        self.sockets.append(ws)
        return ws

    def by_channel(self, channel: str) -> FakeWebSocket:
        for ws in self.sockets:
            if ws.url.endswith("/" + channel):
                return ws
        raise KeyError(channel)

    def connection_factory(self):
        return partial(Connection, connect=self)


@pytest.fixture
def user_info() -> UserInfo:
    return UserInfo(key="1", name="Alice", color="#ff0000", user_id="42")


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()
