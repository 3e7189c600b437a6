"""Render pipeline: ZPL text to packed monochrome bitmap."""

import io
import logging
from collections.abc import Sequence
from pathlib import Path

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

from thermalabel.models.label import LabelDimensions, validate_label_size
from thermalabel.rendering.fonts import get_font_manager
from thermalabel.rendering.mono import image_to_mono
from thermalabel.zpl.interpreter import LabelInterpreter
from thermalabel.zpl.parser import parse_zpl

logger = logging.getLogger(__name__)


class RenderedLabel(BaseModel):
    """A rendered label ready for encoding."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    image: Image.Image  # Grayscale render before monochrome conversion
    bitmap: bytes  # Packed, MSB first, 1 bit = white
    width: int
    height: int
    diagnostics: list[str] = Field(default_factory=list)

    @property
    def row_bytes(self) -> int:
        return (self.width + 7) // 8

    def to_mono_image(self) -> Image.Image:
        """Build a 1-bit PIL image of exactly what will be printed."""
        packed = Image.frombytes("1", (self.row_bytes * 8, self.height), self.bitmap)
        return packed.crop((0, 0, self.width, self.height))


class LabelEngine:
    """Renders ZPL labels to packed bitmaps and preview images.

    Label dimensions are validated before anything is drawn; command
    failures are reported as diagnostics on the result.
    """

    def __init__(self, custom_font_paths: Sequence[str | Path] | None = None) -> None:
        self._interpreter = LabelInterpreter(get_font_manager(custom_font_paths))

    def render(self, zpl: str, dimensions: LabelDimensions, dither: bool = True) -> RenderedLabel:
        """Render ZPL to a packed monochrome bitmap.

        Args:
            zpl: ZPL markup.
            dimensions: Label size in millimeters.
            dither: Apply Floyd-Steinberg dithering when reducing to 1 bit.

        Returns:
            RenderedLabel with bitmap and diagnostics.

        Raises:
            LabelSizeError: If the label dimensions are out of bounds.
        """
        size = validate_label_size(dimensions.width_mm, dimensions.height_mm)

        result = self._interpreter.interpret(parse_zpl(zpl), size.width_px, size.height_px)
        if result.diagnostics:
            logger.warning(f"ZPL render produced {len(result.diagnostics)} warning(s): {result.diagnostics}")

        bitmap = image_to_mono(result.image, dither=dither)
        return RenderedLabel(
            image=result.image,
            bitmap=bitmap,
            width=size.width_px,
            height=size.height_px,
            diagnostics=result.diagnostics,
        )

    def render_preview(
        self,
        zpl: str,
        dimensions: LabelDimensions,
        dither: bool = True,
        format: str = "PNG",
    ) -> bytes:
        """Render ZPL to a monochrome preview image.

        Args:
            zpl: ZPL markup.
            dimensions: Label size in millimeters.
            dither: Apply dithering, as when printing.
            format: Image format (PNG, BMP, ...).

        Returns:
            Image data as bytes.
        """
        label = self.render(zpl, dimensions, dither=dither)
        buffer = io.BytesIO()
        label.to_mono_image().save(buffer, format=format)
        return buffer.getvalue()
