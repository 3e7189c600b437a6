"""Grayscale raster surface used as the drawing target for labels."""

import logging
import math

from PIL import Image, ImageDraw

from thermalabel.models.label import MAX_WIDTH_PX, LabelSizeError
from thermalabel.rendering.fonts import FontManager, FontType, get_font_manager

logger = logging.getLogger(__name__)

BLACK = 0
WHITE = 255

# Margin around text for reverse-printed fields
TEXT_MARGIN = 2

# Clockwise rotation in degrees -> PIL transpose
_TRANSPOSE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


class LabelCanvas:
    """An 8-bit grayscale pixel buffer with primitive drawing operations.

    The canvas starts white. Coordinates are in printer dots with the origin
    in the top-left corner.
    """

    def __init__(
        self,
        width: int,
        height: int,
        font_manager: FontManager | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        if width > MAX_WIDTH_PX:
            raise LabelSizeError(f"Canvas width ({width}px) exceeds maximum ({MAX_WIDTH_PX}px)")
        self.image = Image.new("L", (width, height), WHITE)
        self._draw = ImageDraw.Draw(self.image)
        self.font_manager = font_manager or get_font_manager()

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def pixels(self) -> bytes:
        """Return the buffer as one luminance byte per pixel, row-major."""
        return self.image.tobytes()

    def fill_rect(self, x: int, y: int, width: int, height: int, color: int = BLACK) -> None:
        """Fill a width x height rectangle with its top-left corner at (x, y)."""
        if width <= 0 or height <= 0:
            return
        self._draw.rectangle([x, y, x + width - 1, y + height - 1], fill=color)

    def stroke_rect(
        self,
        x: int,
        y: int,
        width: int,
        height: int,
        thickness: int,
        color: int = BLACK,
    ) -> None:
        """Draw a rectangle border of the given thickness inside the box."""
        if width <= 0 or height <= 0:
            return
        self._draw.rectangle(
            [x, y, x + width - 1, y + height - 1],
            outline=color,
            width=max(1, thickness),
        )

    def rounded_rect(
        self,
        x: int,
        y: int,
        width: int,
        height: int,
        radius: float,
        color: int = BLACK,
        thickness: int | None = None,
    ) -> None:
        """Draw a rounded rectangle, filled when thickness is None."""
        if width <= 0 or height <= 0:
            return
        radius = max(0.0, min(radius, width / 2, height / 2))
        box = [x, y, x + width - 1, y + height - 1]
        if thickness is None:
            self._draw.rounded_rectangle(box, radius=radius, fill=color)
        else:
            self._draw.rounded_rectangle(box, radius=radius, outline=color, width=max(1, thickness))

    def measure_text(self, text: str, font_id: str, height: int, width: int | None = None) -> tuple[int, int]:
        """Measure the advance width and nominal height of a text run."""
        font = self.font_manager.get_font(font_id, height)
        return self._scaled_width(self._text_length(text, font), height, width), height

    def draw_text(
        self,
        text: str,
        x: int,
        y: int,
        font_id: str = "0",
        height: int = 30,
        width: int | None = None,
        rotation: int = 0,
        reverse: bool = False,
    ) -> tuple[int, int]:
        """Draw text with its unrotated top-left corner at (x, y).

        Rotation is clockwise around (x, y). When reverse is set, a black box
        covering the text plus a small margin is drawn and the text is knocked
        out in white.

        Returns:
            Measured (width, height) of the text run before rotation.
        """
        font = self.font_manager.get_font(font_id, height)
        natural_width = self._text_length(text, font)
        text_width = self._scaled_width(natural_width, height, width)

        # Glyph descenders may extend below the nominal font height
        ink_height = height
        if text:
            ink_height = max(height, math.ceil(font.getbbox(text)[3]))

        m = TEXT_MARGIN
        tile_size = (text_width + 2 * m, ink_height + 2 * m)
        text_mask = Image.new("L", tile_size, 0)
        if text and natural_width > 0:
            glyphs = Image.new("L", (natural_width, ink_height), 0)
            ImageDraw.Draw(glyphs).text((0, 0), text, font=font, fill=255)
            if text_width != natural_width:
                glyphs = glyphs.resize((max(1, text_width), ink_height))
            text_mask.paste(glyphs, (m, m))

        box_mask = None
        if reverse:
            box_mask = Image.new("L", tile_size, 0)
            ImageDraw.Draw(box_mask).rectangle([0, 0, text_width + 2 * m - 1, height + 2 * m - 1], fill=255)

        rotation = rotation % 360
        if rotation in _TRANSPOSE:
            text_mask = text_mask.transpose(_TRANSPOSE[rotation])
            if box_mask is not None:
                box_mask = box_mask.transpose(_TRANSPOSE[rotation])
        elif rotation != 0:
            raise ValueError(f"Unsupported rotation: {rotation}")

        left, top = self._tile_origin(x, y, tile_size, rotation)
        if box_mask is not None:
            self.image.paste(BLACK, (left, top), box_mask)
            self.image.paste(WHITE, (left, top), text_mask)
        else:
            self.image.paste(BLACK, (left, top), text_mask)

        return text_width, height

    def blit_bitmap(self, data: bytes, row_bytes: int, rows: int, x: int, y: int) -> None:
        """Copy a packed 1-bit bitmap onto the canvas at (x, y).

        Bits are MSB-first with 0 = black and 1 = white. Missing trailing
        bytes are treated as white.
        """
        if row_bytes <= 0 or rows <= 0:
            return
        expected = row_bytes * rows
        packed = bytes(data[:expected]).ljust(expected, b"\xff")
        tile = Image.frombytes("1", (row_bytes * 8, rows), packed)
        self.image.paste(tile.convert("L"), (x, y))

    @staticmethod
    def _text_length(text: str, font: FontType) -> int:
        if not text:
            return 0
        return math.ceil(font.getlength(text))

    @staticmethod
    def _scaled_width(natural_width: int, height: int, width: int | None) -> int:
        if not width or width == height or height <= 0:
            return natural_width
        return round(natural_width * width / height)

    @staticmethod
    def _tile_origin(x: int, y: int, tile_size: tuple[int, int], rotation: int) -> tuple[int, int]:
        """Top-left corner of a rotated tile whose local origin pixel (m, m) lands on (x, y)."""
        tile_w, tile_h = tile_size
        m = TEXT_MARGIN
        if rotation == 90:
            return x - (tile_h - 1 - m), y - m
        if rotation == 180:
            return x - (tile_w - 1 - m), y - (tile_h - 1 - m)
        if rotation == 270:
            return x - m, y - (tile_w - 1 - m)
        return x - m, y - m
