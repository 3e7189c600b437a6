"""Mutable interpreter state for a single label render."""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel


class Orientation(StrEnum):
    """ZPL field orientation letters."""

    NORMAL = "N"
    ROTATED = "R"  # 90 degrees clockwise
    INVERTED = "I"  # 180 degrees
    BOTTOM_UP = "B"  # 270 degrees

    @property
    def degrees(self) -> int:
        return _DEGREES[self]

    @classmethod
    def from_letter(cls, letter: str) -> "Orientation":
        """Parse an orientation letter (case-insensitive).

        Raises:
            ValueError: If the letter is not one of N, R, I, B.
        """
        try:
            return cls(letter.upper())
        except ValueError:
            raise ValueError(f"unknown orientation '{letter}'") from None


_DEGREES = {
    Orientation.NORMAL: 0,
    Orientation.ROTATED: 90,
    Orientation.INVERTED: 180,
    Orientation.BOTTOM_UP: 270,
}


class PendingBarcode(BaseModel):
    """Barcode parameters waiting for a field data payload."""

    type: Literal["128", "QR"]
    orientation: str = "N"
    x: int = 0
    y: int = 0
    # Code 128
    height: int | None = None
    module_width: int | None = None
    print_text: bool = True
    text_above: bool = False
    # QR
    model: int | None = None
    magnification: int | None = None


class InterpreterState(BaseModel):
    """Cursor, font and barcode state threaded through command handlers.

    A new instance holds the documented defaults; the interpreter creates
    one per render call.
    """

    x: int = 0
    y: int = 0
    font: str = "0"
    font_height: int = 30
    font_width: int = 30
    orientation: Orientation = Orientation.NORMAL
    field_reverse: bool = False
    barcode_module_width: int = 2
    barcode_ratio: float = 3.0
    barcode_height: int = 100
    pending_barcode: PendingBarcode | None = None
    label_home_x: int = 0
    label_home_y: int = 0
    block_width: int | None = None

    @property
    def rotation(self) -> int:
        """Current rotation in degrees clockwise."""
        return self.orientation.degrees
