# Message kinds (the `cmd` field; canonical list lives here)

C_ACT = "act"
C_POINTER = "pointer"
C_MARKCELL = "markcell"
C_CLOSEDIALOG = "closedialog"
C_SYNC = "sync"
C_CLONEVIEW = "cloneview"

# `act` sub-commands
A_HIGHLIGHT = "hl:"
A_SELECT = "sl:"
A_DESELECT = "ds:"
A_CLEAR = "ds"
A_UNDO = "ud"
A_REDO = "rd"
A_GROUP_START = "gs"
A_GROUP_END = "ge"

# Prefixes the shared session treats as selection changes
SELECTION_PREFIXES = ("hl", "sl", "ds")

# The protocol has no "no pointer" value; park it far off the grid instead.
CLEAR_POINTER_XY = -640000
