"""Decoders for ^GF graphic field data."""

import math
import re

from pydantic import BaseModel

# ^GFa,b,c,d,data
GRAPHIC_FIELD_PATTERN = re.compile(r"^([ABH]),(\d+),(\d+),(\d+),(.+)", re.IGNORECASE | re.DOTALL)

_HEX_PREFIX = re.compile(r"^[0-9A-Fa-f]+")
_HEX_DIGITS = frozenset("0123456789ABCDEFabcdef")


class GraphicField(BaseModel):
    """A decoded graphic field bitmap (0 bit = black)."""

    data: bytes
    row_bytes: int
    rows: int

    @property
    def width(self) -> int:
        return self.row_bytes * 8


def _hex_value(text: str) -> int:
    """Value of the leading hex digits of text, or 0 if there are none."""
    match = _HEX_PREFIX.match(text)
    return int(match.group(0), 16) if match else 0


def decode_hex(data: str) -> bytes:
    """Decode plain ASCII hex, ignoring whitespace.

    An odd trailing digit is dropped; non-hex pairs decode to 0.
    """
    clean = "".join(data.split())
    return bytes(_hex_value(clean[i : i + 2]) & 0xFF for i in range(0, len(clean) - 1, 2))


def decode_binary(data: str) -> bytes:
    """Decode raw binary field data carried as characters."""
    return bytes(ord(c) & 0xFF for c in data)


def decode_compressed_hex(data: str, total_bytes: int) -> bytes:
    """Decode ZPL run-length compressed hex.

    G..Y repeat the following hex nibble 1..19 times and g..z repeat it
    20..400 times (step 20); the nibble fills both halves of each output
    byte. Any other hex pair is a literal byte and any other character is
    skipped. Decoding stops at total_bytes or end of input.

    Args:
        data: Compressed hex text.
        total_bytes: Declared size of the decoded bitmap.

    Returns:
        At most total_bytes bytes; a truncated field yields fewer and the
        remainder is left to the caller (blit_bitmap pads it white).
    """
    out = bytearray(total_bytes)
    pos = 0
    i = 0

    while i < len(data) and pos < total_bytes:
        char = data[i]

        if "G" <= char <= "Y" or "g" <= char <= "z":
            if char <= "Y":
                count = ord(char) - ord("F")
            else:
                count = (ord(char) - ord("f")) * 20
            nibble_char = data[i + 1] if i + 1 < len(data) else "0"
            nibble = int(nibble_char, 16) if nibble_char in _HEX_DIGITS else 0
            value = (nibble << 4) | nibble
            run = min(count, total_bytes - pos)
            out[pos : pos + run] = bytes([value]) * run
            pos += run
            i += 2
        elif char in _HEX_DIGITS:
            out[pos] = _hex_value(data[i : i + 2]) & 0xFF
            pos += 1
            i += 2
        else:
            i += 1

    return bytes(out[:pos])


def parse_graphic_field(params: str) -> GraphicField:
    """Parse ^GF parameters into a decoded bitmap.

    Args:
        params: Raw parameter string, "format,total,field,row_bytes,data".

    Returns:
        GraphicField with ceil(total / row_bytes) rows.

    Raises:
        ValueError: If the parameters are malformed.
    """
    match = GRAPHIC_FIELD_PATTERN.match(params)
    if not match:
        raise ValueError("expected format,total_bytes,field_bytes,row_bytes,data")

    encoding = match.group(1).upper()
    total_bytes = int(match.group(2))
    row_bytes = int(match.group(4))
    data = match.group(5)

    if row_bytes <= 0:
        raise ValueError("row bytes must be positive")

    if encoding == "A":
        decoded = decode_hex(data)
    elif encoding == "B":
        decoded = decode_binary(data)
    else:
        decoded = decode_compressed_hex(data, total_bytes)

    return GraphicField(
        data=decoded,
        row_bytes=row_bytes,
        rows=math.ceil(total_bytes / row_bytes),
    )
