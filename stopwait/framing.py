"""Byte stuffing, parity and error-code helpers for the link layer."""

from __future__ import annotations

from dataclasses import dataclass

FLAG = "$"
ESCAPE = "/"


@dataclass(frozen=True)
class ErrorCode:
    """Which faults to inject when a frame is sent."""

    modification: bool = False
    duplication: bool = False
    delay: bool = False
    loss: bool = False

    @classmethod
    def parse(cls, code: str) -> ErrorCode:
        """Parse a four-character code such as ``"1010"``; ``'1'`` means on."""
        if len(code) < 4:
            raise ValueError(f"error code {code!r} must have four characters")
        modification, duplication, delay, loss = (ch == "1" for ch in code[:4])
        return cls(modification, duplication, delay, loss)


def stuff_payload(payload: str) -> str:
    """Escape flag and escape characters and wrap the payload in flags."""
    body = "".join(ESCAPE + ch if ch in (FLAG, ESCAPE) else ch for ch in payload)
    return FLAG + body + FLAG


def unstuff_payload(stuffed: str) -> str:
    """Strip the surrounding flags and remove escape characters."""
    if not stuffed:
        raise ValueError("cannot unstuff an empty frame")
    closing = stuffed[-1]
    chars = iter(stuffed[1:-1])
    out = []
    for ch in chars:
        if ch == ESCAPE:
            # An escape right before the closing flag takes the flag itself.
            out.append(next(chars, closing))
        else:
            out.append(ch)
    return "".join(out)


def _ones(text: str) -> int:
    return sum(bin(ord(ch) & 0xFF).count("1") for ch in text)


def parity_byte(stuffed: str) -> str:
    """Return ``'0'`` if the payload has an even number of set bits, else ``'1'``."""
    odd = _ones(stuffed) % 2
    return str(odd)


def has_single_bit_error(stuffed_payload: str, parity: str) -> bool:
    """Check the payload against its parity trailer; an empty trailer is an error."""
    if not parity:
        return True
    return (_ones(stuffed_payload) + _ones(parity[0])) % 2 != 0


def flip_bit(payload: str, byte_index: int, bit_position: int) -> str:
    """Return the payload with one bit of one character inverted."""
    if not 0 <= byte_index < len(payload):
        raise IndexError(f"byte index {byte_index} outside payload of length {len(payload)}")
    if not 0 <= bit_position <= 7:
        raise ValueError(f"bit position {bit_position} must be between 0 and 7")
    flipped = chr(ord(payload[byte_index]) ^ (1 << bit_position))
    return payload[:byte_index] + flipped + payload[byte_index + 1:]


def binary_to_ascii(bits: str) -> str:
    """Decode a string of '0'/'1' characters, eight bits per character, MSB first."""
    chunks = (bits[start:start + 8] for start in range(0, len(bits), 8))
    return "".join(
        chr(sum(1 << (7 - pos) for pos, bit in enumerate(chunk) if bit == "1"))
        for chunk in chunks
    )