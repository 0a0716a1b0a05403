"""Message types exchanged between publishers, subscribers and the dispatcher."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import TypeVar

from .tlv import iter_tlvs

DISPATCHER_IP_ADDR = "127.0.0.1"
DISPATCHER_UDP_PORT = 40000
TLV_CODE_NAME = 1
TLV_CODE_NAME_LEN = 32

# msgId, msgType, subMsgType, priority, msgCode, publisher/subscriber id, tlv size
_HEADER = struct.Struct("<IiiiIIH")
HEADER_SIZE = _HEADER.size
_MAX_TLV_BUFFER = 0xFFFF


class MsgType(IntEnum):
    """Direction of a message."""

    SUB_TO_DISPATCH = 0
    DISPATCH_TO_SUB = 1
    PUB_TO_DISPATCH = 2
    DISPATCH_TO_PUB = 3


class SubMsgType(IntEnum):
    """What a message asks for or carries."""

    DATA = 0
    ADD = 1
    DELETE = 2
    REGISTER = 3
    UNREGISTER = 4
    ERROR = 5
    ID_ALLOC_SUCCESS = 6


class Priority(IntEnum):
    """Delivery priority of a message."""

    HIGH = 0
    MEDIUM = 1
    LOW = 2
    MAX = 3


class ErrorCode(IntEnum):
    """Error codes carried in error replies."""

    TLV_MISSING = 0


_MSG_TYPE_NAMES = {
    MsgType.SUB_TO_DISPATCH: "SUBS_TO_COORD",
    MsgType.DISPATCH_TO_SUB: "COORD_TO_SUBS",
    MsgType.PUB_TO_DISPATCH: "PUB_TO_COORD",
    MsgType.DISPATCH_TO_PUB: "COORD_TO_PUB",
}

_SUB_MSG_TYPE_NAMES = {
    SubMsgType.DATA: "SUB_MSG_DATA",
    SubMsgType.ADD: "SUB_MSG_ADD",
    SubMsgType.DELETE: "SUB_MSG_DELETE",
    SubMsgType.REGISTER: "SUB_MSG_REGISTER",
    SubMsgType.UNREGISTER: "SUB_MSG_UNREGISTER",
    SubMsgType.ERROR: "SUB_MSG_ERROR",
    SubMsgType.ID_ALLOC_SUCCESS: "SUB_MSG_ID_ALLOC_SUCCESS",
}

_TLV_NAMES = {TLV_CODE_NAME: "TLV_CODE_NAME"}
_TLV_DATA_LENS = {TLV_CODE_NAME: TLV_CODE_NAME_LEN}

_E = TypeVar("_E", bound=IntEnum)


def _as_enum(enum_cls: type[_E], value: int) -> _E | int:
    try:
        return enum_cls(value)
    except ValueError:
        return value


def msg_type_to_string(msg_type: int) -> str:
    """Return the display name of a message direction, or ``UNKNOWN``."""
    return _MSG_TYPE_NAMES.get(_as_enum(MsgType, msg_type), "UNKNOWN")


def sub_msg_type_to_string(sub_msg_type: int) -> str:
    """Return the display name of a sub-message type, or ``UNKNOWN``."""
    return _SUB_MSG_TYPE_NAMES.get(_as_enum(SubMsgType, sub_msg_type), "UNKNOWN")


def tlv_name(tlv_code: int) -> str:
    """Return the display name of a TLV code, or ``UNKNOWN``."""
    return _TLV_NAMES.get(tlv_code, "UNKNOWN")


def tlv_data_len(tlv_code: int) -> int:
    """Return the fixed value length of a TLV code, or 0 if it has none."""
    return _TLV_DATA_LENS.get(tlv_code, 0)


@dataclass
class Dmsg:
    """A dispatcher message: a fixed header followed by a TLV buffer.

    ``peer_id`` holds the publisher or subscriber id, depending on the
    direction of the message; both names refer to the same value.
    """

    msg_type: MsgType | int
    sub_msg_type: SubMsgType | int
    msg_code: int = 0
    msg_id: int = 0
    priority: Priority | int = Priority.HIGH
    peer_id: int = 0
    tlv_buffer: bytes = b""

    @property
    def publisher_id(self) -> int:
        return self.peer_id

    @publisher_id.setter
    def publisher_id(self, value: int) -> None:
        self.peer_id = value

    @property
    def subscriber_id(self) -> int:
        return self.peer_id

    @subscriber_id.setter
    def subscriber_id(self, value: int) -> None:
        self.peer_id = value

    @property
    def tlv_buffer_size(self) -> int:
        return len(self.tlv_buffer)

    def pack(self) -> bytes:
        """Serialize the message to its wire form."""
        if len(self.tlv_buffer) > _MAX_TLV_BUFFER:
            raise ValueError(
                f"TLV buffer of {len(self.tlv_buffer)} bytes exceeds {_MAX_TLV_BUFFER}"
            )
        try:
            header = _HEADER.pack(
                self.msg_id,
                int(self.msg_type),
                int(self.sub_msg_type),
                int(self.priority),
                self.msg_code,
                self.peer_id,
                len(self.tlv_buffer),
            )
        except struct.error as exc:
            raise ValueError(f"message field out of range: {exc}") from exc
        return header + bytes(self.tlv_buffer)

    @classmethod
    def unpack(cls, data: bytes) -> Dmsg:
        """Parse a message from its wire form; trailing bytes are ignored."""
        raw = bytes(data)
        if len(raw) < HEADER_SIZE:
            raise ValueError(
                f"message of {len(raw)} bytes is shorter than the {HEADER_SIZE}-byte header"
            )
        msg_id, msg_type, sub_msg_type, priority, msg_code, peer_id, size = (
            _HEADER.unpack_from(raw)
        )
        end = HEADER_SIZE + size
        if end > len(raw):
            raise ValueError(
                f"message declares {size} TLV bytes, only {len(raw) - HEADER_SIZE} present"
            )
        return cls(
            msg_type=_as_enum(MsgType, msg_type),
            sub_msg_type=_as_enum(SubMsgType, sub_msg_type),
            msg_code=msg_code,
            msg_id=msg_id,
            priority=_as_enum(Priority, priority),
            peer_id=peer_id,
            tlv_buffer=raw[HEADER_SIZE:end],
        )

    def debug_string(self) -> str:
        """Return a one-line description of the header and every TLV record."""
        parts = [
            f"Msg ID: {self.msg_id}",
            f"Msg Type: {msg_type_to_string(self.msg_type)}",
            f"Sub Msg Type: {sub_msg_type_to_string(self.sub_msg_type)}",
            f"Msg Code: {self.msg_code}",
            f"Publisher ID: {self.publisher_id}",
            f"Subscriber ID: {self.subscriber_id}",
            f"TLV Buffer Size: {self.tlv_buffer_size}",
        ]
        for tlv_type, value in iter_tlvs(self.tlv_buffer):
            text = value.split(b"\0", 1)[0].decode("utf-8", errors="replace")
            parts.append(f"TLV Type : {tlv_type}")
            parts.append(f"TLV Length : {len(value)}")
            parts.append(f"TLV Value : {text}")
        return "".join(f"{part} | " for part in parts)


def prepare_message(
    msg_type: MsgType | int,
    sub_msg_type: SubMsgType | int,
    msg_code: int,
    trailing_space: int,
) -> Dmsg:
    """Create a message with a zero-filled TLV buffer of ``trailing_space`` bytes."""
    if trailing_space < 0:
        raise ValueError("trailing_space must not be negative")
    return Dmsg(
        msg_type=msg_type,
        sub_msg_type=sub_msg_type,
        msg_code=msg_code,
        tlv_buffer=bytes(trailing_space),
    )