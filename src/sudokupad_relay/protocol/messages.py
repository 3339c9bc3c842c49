from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Optional, TypeAlias, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class MessageError(ValueError):
    """Raised for payloads that are not a message of a known kind."""


class _Msg(BaseModel):
    # Fields we don't model ride along untouched so forwarding is lossless.
    model_config = ConfigDict(extra="allow")


class Act(_Msg):
    cmd: Literal["act"]
    seq: Optional[int] = None
    act: str


class Pointer(_Msg):
    cmd: Literal["pointer"]
    x: Union[int, float]
    y: Union[int, float]
    host: Optional[Any] = None


class MarkCell(_Msg):
    cmd: Literal["markcell"]
    cell: str


class CloseDialog(_Msg):
    cmd: Literal["closedialog"]


class Sync(_Msg):
    """Full-state snapshot. Everything besides `cmd`/`seq` is opaque."""

    cmd: Literal["sync"]
    seq: Optional[int] = None


class CloneView(_Msg):
    cmd: Literal["cloneview"]
    hostkey: str
    hostname: str
    hostcolor: str


Message: TypeAlias = Annotated[
    Union[Act, Pointer, MarkCell, CloseDialog, Sync, CloneView],
    Field(discriminator="cmd"),
]

_MESSAGE = TypeAdapter(Message)


class UserInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str = "1"
    name: str
    color: str
    user_id: str = Field(alias="userId")


def parse_message(raw: str | bytes) -> Message:
    try:
        return _MESSAGE.validate_json(raw)
    except ValidationError as e:
        raise MessageError(str(e)) from e


def message_to_dict(msg: Message) -> dict[str, Any]:
    data = msg.model_dump(mode="json")
    # Unset optional fields are omitted on the wire, never sent as null.
    for name in type(msg).model_fields:
        if data.get(name) is None:
            data.pop(name, None)
    return data


def dump_message(msg: Message) -> str:
    return json.dumps(message_to_dict(msg), separators=(",", ":"), ensure_ascii=False)
