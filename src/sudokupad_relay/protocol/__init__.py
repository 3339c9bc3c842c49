from .cells import CellParseError, format_cells, parse_cells
from .constants import (
    A_CLEAR,
    A_GROUP_END,
    A_GROUP_START,
    A_SELECT,
    C_ACT,
    C_CLONEVIEW,
    C_CLOSEDIALOG,
    C_MARKCELL,
    C_POINTER,
    C_SYNC,
    CLEAR_POINTER_XY,
)
from .messages import (
    Act,
    CloneView,
    CloseDialog,
    MarkCell,
    Message,
    MessageError,
    Pointer,
    Sync,
    UserInfo,
    dump_message,
    message_to_dict,
    parse_message,
)
from .subcommands import is_selection_change, parse_act

__all__ = [
    "A_CLEAR",
    "A_GROUP_END",
    "A_GROUP_START",
    "A_SELECT",
    "C_ACT",
    "C_CLONEVIEW",
    "C_CLOSEDIALOG",
    "C_MARKCELL",
    "C_POINTER",
    "C_SYNC",
    "CLEAR_POINTER_XY",
    "Act",
    "CellParseError",
    "CloneView",
    "CloseDialog",
    "MarkCell",
    "Message",
    "MessageError",
    "Pointer",
    "Sync",
    "UserInfo",
    "dump_message",
    "format_cells",
    "is_selection_change",
    "message_to_dict",
    "parse_act",
    "parse_cells",
    "parse_message",
]
