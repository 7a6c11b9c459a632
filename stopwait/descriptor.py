"""Field-by-name access to frames: names, types, and string and typed access."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from stopwait.message import Frame, MessageType

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_FLOAT32 = struct.Struct("<f")


@dataclass(frozen=True)
class FieldInfo:
    """One field of a frame: its public name, type name and attribute."""

    name: str
    type_string: str
    attribute: str
    editable: bool = True


_FIELDS = (
    FieldInfo("M_Header", "string", "header"),
    FieldInfo("M_Payload", "string", "payload"),
    FieldInfo("M_Trailer", "string", "trailer"),
    FieldInfo("M_Type", "int", "msg_type"),
    FieldInfo("sending_time", "float", "sending_time"),
    FieldInfo("id", "int", "id"),
)


def _checked_int(value: int, name: str) -> int:
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"value {value} for field {name!r} does not fit in a 32-bit integer")
    return value


def _to_float32(value: float, name: str) -> float:
    try:
        return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
    except OverflowError as exc:
        raise ValueError(f"value {value} for field {name!r} does not fit in a float") from exc


def _store_int(frame: Frame, info: FieldInfo, value: int) -> None:
    value = _checked_int(value, info.name)
    if info.attribute == "msg_type":
        try:
            value = MessageType(value)
        except ValueError:
            pass
    setattr(frame, info.attribute, value)


class FrameDescriptor:
    """Describes the fields of :class:`Frame` and reads or writes them by name."""

    def __init__(self) -> None:
        self._fields = _FIELDS
        self._by_name = {info.name: info for info in _FIELDS}

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    def _info(self, name: str) -> FieldInfo:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"frame has no field {name!r}") from None

    def field_names(self) -> list[str]:
        """Names of all fields, in declaration order."""
        return [info.name for info in self._fields]

    def find_field(self, name: str) -> int:
        """Index of the named field, or -1 if there is no such field."""
        for index, info in enumerate(self._fields):
            if info.name == name:
                return index
        return -1

    def field_type(self, name: str) -> str:
        """Type name of the field: ``string``, ``int`` or ``float``."""
        return self._info(name).type_string

    def get_as_string(self, frame: Frame, name: str) -> str:
        """Return the field's value rendered as text."""
        info = self._info(name)
        value = getattr(frame, info.attribute)
        if info.type_string == "string":
            return value
        if info.type_string == "int":
            return str(int(value))
        return repr(float(value))

    def set_from_string(self, frame: Frame, name: str, value: str) -> None:
        """Parse ``value`` according to the field's type and store it."""
        info = self._info(name)
        if info.type_string == "string":
            setattr(frame, info.attribute, value)
        elif info.type_string == "int":
            try:
                parsed = int(value.strip(), 0)
            except ValueError:
                raise ValueError(f"cannot parse {value!r} as an integer for field {name!r}") from None
            _store_int(frame, info, parsed)
        else:
            try:
                parsed_float = float(value)
            except ValueError:
                raise ValueError(f"cannot parse {value!r} as a number for field {name!r}") from None
            setattr(frame, info.attribute, _to_float32(parsed_float, name))

    def get_value(self, frame: Frame, name: str):
        """Return the field's value as a str, int or float."""
        info = self._info(name)
        value = getattr(frame, info.attribute)
        if info.type_string == "int":
            return int(value)
        if info.type_string == "float":
            return float(value)
        return value

    def set_value(self, frame: Frame, name: str, value) -> None:
        """Store a typed value, rejecting values of the wrong type or range."""
        info = self._info(name)
        if info.type_string == "string":
            if not isinstance(value, str):
                raise TypeError(f"field {name!r} needs a string, got {type(value).__name__}")
            setattr(frame, info.attribute, value)
        elif info.type_string == "int":
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"field {name!r} needs an integer, got {type(value).__name__}")
            _store_int(frame, info, value)
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"field {name!r} needs a number, got {type(value).__name__}")
            setattr(frame, info.attribute, _to_float32(float(value), name))