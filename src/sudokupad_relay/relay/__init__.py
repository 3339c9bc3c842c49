from .connection import Connection
from .manager import RelaySlot, build_view_url, connect, random_user_id
from .relay import Relay, RelaySettings
from .upload import BLANK_PUZZLE, upload_puzzle

__all__ = [
    "BLANK_PUZZLE",
    "Connection",
    "Relay",
    "RelaySettings",
    "RelaySlot",
    "build_view_url",
    "connect",
    "random_user_id",
    "upload_puzzle",
]
