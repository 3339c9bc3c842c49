from __future__ import annotations

import asyncio
import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Optional

from sudokupad_relay.config import Settings, get_settings

log = logging.getLogger(__name__)

# 4x4 grid with no givens; only seeds the channels so views have something to load.
BLANK_PUZZLE: dict[str, Any] = {
    "id": "",
    "regions": [
        [[0, 0], [0, 1], [1, 0], [1, 1]],
        [[0, 2], [0, 3], [1, 2], [1, 3]],
        [[2, 0], [2, 1], [3, 0], [3, 1]],
        [[2, 2], [2, 3], [3, 2], [3, 3]],
    ],
    "cells": [[{}, {}, {}, {}], [{}, {}, {}, {}], [{}, {}, {}, {}], [{}, {}, {}, {}]],
}


def _post_json_sync(*, url: str, timeout_s: float, payload: dict) -> str:
    data = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    with urllib.request.urlopen(req, timeout=timeout_s) as resp:
        return resp.read().decode("utf-8")


async def upload_puzzle(
    puzzle: dict[str, Any],
    short_id: str,
    format: str = "scl",
    *,
    settings: Optional[Settings] = None,
) -> bool:
    """
    Create `{channel_prefix}{short_id}` on the puzzle host.

    Returns True if the puzzle was created or already existed. Every failure
    (HTTP status, network, unexpected response) is logged and returns False.
    """
    settings = settings or get_settings()
    short_id = settings.channel_prefix + short_id
    puzzle = dict(puzzle, id=short_id)
    payload = {"puzzle": format + json.dumps(puzzle, separators=(",", ":")), "shortid": short_id}

    try:
        text = await asyncio.to_thread(
            _post_json_sync,
            url=settings.base_url + "admin/createlink",
            timeout_s=settings.upload_timeout_s,
            payload=payload,
        )
    except urllib.error.HTTPError as e:
        log.error("HTTP error while uploading puzzle %s", e.code)
        return False
    except (urllib.error.URLError, http.client.HTTPException, UnicodeDecodeError, OSError) as e:
        log.error("Error uploading puzzle %s: %s", short_id, e)
        return False

    if text == "":
        log.info("Puzzle %s already exists, ignoring", short_id)
        return True
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        log.error("Bad response while uploading puzzle %s: %s", short_id, e)
        return False
    got = data.get("shortid") if isinstance(data, dict) else None
    if got != short_id:
        log.error("Wrong shortid in response, got %s, expected %s", got, short_id)
        return False
    log.info("Created puzzle %s", short_id)
    return True
