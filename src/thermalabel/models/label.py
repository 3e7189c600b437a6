"""Label geometry models and size validation."""

import math

from pydantic import BaseModel

# 203 DPI print head
DPMM = 8
MAX_WIDTH_PX = 384
MIN_WIDTH_MM = 20
MAX_WIDTH_MM = 48


def mm_to_px(mm: float) -> int:
    """Convert millimeters to dots at 8 dots/mm, rounding half up."""
    return math.floor(mm * DPMM + 0.5)


class LabelDimensions(BaseModel):
    """Physical label size in millimeters."""

    width_mm: float
    height_mm: float


class LabelSize(BaseModel):
    """Validated label size in printer dots."""

    width_px: int
    height_px: int

    @property
    def row_bytes(self) -> int:
        """Bytes per row of the packed bitmap."""
        return (self.width_px + 7) // 8


def validate_label_size(width_mm: float, height_mm: float) -> LabelSize:
    """Validate label dimensions and convert them to dots.

    Args:
        width_mm: Label width in millimeters.
        height_mm: Label height in millimeters.

    Returns:
        LabelSize with pixel dimensions.

    Raises:
        LabelSizeError: If the width or height is out of bounds.
    """
    if width_mm < MIN_WIDTH_MM:
        raise LabelSizeError(f"Width must be at least {MIN_WIDTH_MM}mm")
    if width_mm > MAX_WIDTH_MM:
        raise LabelSizeError(f"Width cannot exceed {MAX_WIDTH_MM}mm")
    if height_mm <= 0:
        raise LabelSizeError("Height must be greater than 0")

    width_px = mm_to_px(width_mm)
    height_px = mm_to_px(height_mm)

    if width_px > MAX_WIDTH_PX:
        raise LabelSizeError(f"Width exceeds maximum printable width ({MAX_WIDTH_PX}px)")
    if height_px < 1:
        raise LabelSizeError("Height must be at least one dot")

    return LabelSize(width_px=width_px, height_px=height_px)


class LabelSizeError(ValueError):
    """Exception raised when label dimensions are out of bounds."""

    pass
