import asyncio
import json

from sudokupad_relay.tools.record_channel import record


def test_record_writes_one_line_per_message(tmp_path, connector):
    out = tmp_path / "logs" / "room.jsonl"

    async def scenario():
        task = asyncio.create_task(record("room", out, name="tap", echo=False, connect=connector))
        while not connector.sockets:
            await asyncio.sleep(0)
        ws = connector.sockets[0]
        ws.feed('{"cmd":"act","seq":1,"act":"vl:4"}')
        ws.feed("garbage")
        ws.feed('{"cmd":"sync","seq":2,"board":"x"}')
        await ws.close()
        await task
        return ws

    ws = asyncio.run(scenario())
    lines = [json.loads(line) for line in out.read_text(encoding="utf-8").splitlines()]
    assert [line["msg"] for line in lines] == [
        {"cmd": "act", "seq": 1, "act": "vl:4"},
        {"cmd": "sync", "seq": 2, "board": "x"},
    ]
    assert all(isinstance(line["ts"], int) for line in lines)
    assert ws.sent_messages()[0]["hostname"] == "tap proxy"
