"""The frame exchanged between sender and receiver, and its wire form."""

from __future__ import annotations

import copy
import struct
from dataclasses import dataclass
from enum import IntEnum

_LENGTH = struct.Struct("<I")
_SCALARS = struct.Struct("<ifi")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class MessageType(IntEnum):
    """Kind of frame carried in the type field."""

    DATA = 0
    ACK = 1
    NACK = 2


@dataclass
class Frame:
    """A data, ACK or NACK frame.

    ``sending_time`` is stored on the wire as a 32-bit float and the
    integer fields as signed 32-bit integers.
    """

    header: str = ""
    payload: str = ""
    trailer: str = ""
    msg_type: int = MessageType.DATA
    sending_time: float = 0.0
    id: int = 0
    name: str = ""

    def dup(self) -> Frame:
        """Return an independent copy of this frame."""
        return copy.copy(self)

    def pack(self) -> bytes:
        """Serialise the frame to bytes."""
        for field_name in ("msg_type", "id"):
            value = int(getattr(self, field_name))
            if not _INT32_MIN <= value <= _INT32_MAX:
                raise ValueError(f"{field_name}={value} does not fit in a 32-bit integer")
        parts = [
            _pack_string(text)
            for text in (self.name, self.header, self.payload, self.trailer)
        ]
        parts.append(
            _SCALARS.pack(int(self.msg_type), float(self.sending_time), int(self.id))
        )
        return b"".join(parts)

    @classmethod
    def unpack(cls, data: bytes) -> Frame:
        """Rebuild a frame from the bytes produced by :meth:`pack`."""
        view = memoryview(bytes(data))
        offset = 0
        texts = []
        try:
            for _ in range(4):
                (length,) = _LENGTH.unpack_from(view, offset)
                offset += _LENGTH.size
                raw = view[offset:offset + length]
                if len(raw) != length:
                    raise ValueError("truncated frame: string runs past the end")
                texts.append(bytes(raw).decode("utf-8", "surrogatepass"))
                offset += length
            msg_type, sending_time, frame_id = _SCALARS.unpack_from(view, offset)
        except struct.error as exc:
            raise ValueError(f"truncated frame: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ValueError(f"malformed string in frame: {exc}") from exc
        offset += _SCALARS.size
        if offset != len(view):
            raise ValueError(f"{len(view) - offset} trailing bytes after frame")
        name, header, payload, trailer = texts
        try:
            kind = MessageType(msg_type)
        except ValueError:
            kind = msg_type
        return cls(
            header=header,
            payload=payload,
            trailer=trailer,
            msg_type=kind,
            sending_time=sending_time,
            id=frame_id,
            name=name,
        )


def _pack_string(text: str) -> bytes:
    encoded = text.encode("utf-8", "surrogatepass")
    return _LENGTH.pack(len(encoded)) + encoded