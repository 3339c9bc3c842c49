from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias, Union

from .cells import parse_cells
from .constants import (
    A_CLEAR,
    A_DESELECT,
    A_GROUP_END,
    A_GROUP_START,
    A_HIGHLIGHT,
    A_REDO,
    A_SELECT,
    A_UNDO,
    SELECTION_PREFIXES,
)


@dataclass(frozen=True)
class AddSelection:
    cells_text: str

    def cells(self) -> list[str]:
        return parse_cells(self.cells_text)


@dataclass(frozen=True)
class RemoveSelection:
    cells_text: str

    def cells(self) -> list[str]:
        return parse_cells(self.cells_text)


@dataclass(frozen=True)
class ClearSelection:
    pass


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Redo:
    pass


@dataclass(frozen=True)
class GroupStart:
    pass


@dataclass(frozen=True)
class GroupEnd:
    pass


@dataclass(frozen=True)
class Opaque:
    """A puzzle edit (or anything else) forwarded without looking inside."""

    payload: str


SubCommand: TypeAlias = Union[
    AddSelection,
    RemoveSelection,
    ClearSelection,
    Undo,
    Redo,
    GroupStart,
    GroupEnd,
    Opaque,
]

_EXACT: dict[str, SubCommand] = {
    A_CLEAR: ClearSelection(),
    A_UNDO: Undo(),
    A_REDO: Redo(),
    A_GROUP_START: GroupStart(),
    A_GROUP_END: GroupEnd(),
}


def parse_act(act: str) -> SubCommand:
    """
    Parse the `act` field of an `act` message.

    Cell lists stay as text; `.cells()` scans them on demand so a malformed
    list only fails the code that actually needs the cells.
    """
    exact = _EXACT.get(act)
    if exact is not None:
        return exact
    if act.startswith(A_HIGHLIGHT) or act.startswith(A_SELECT):
        return AddSelection(act[3:])
    if act.startswith(A_DESELECT):
        return RemoveSelection(act[3:])
    return Opaque(act)


def is_selection_change(sub: SubCommand) -> bool:
    """
    True for anything the shared session treats as a selection change.

    The session matches on the two-letter prefix alone, so `slx` counts even
    though it carries no cell list.
    """
    if isinstance(sub, (AddSelection, RemoveSelection, ClearSelection)):
        return True
    return isinstance(sub, Opaque) and sub.payload.startswith(SELECTION_PREFIXES)
