"""Raster surface and monochrome conversion."""

from thermalabel.rendering.canvas import BLACK, WHITE, LabelCanvas
from thermalabel.rendering.fonts import FontManager, get_font_manager
from thermalabel.rendering.mono import image_to_mono, to_mono

__all__ = [
    "BLACK",
    "WHITE",
    "FontManager",
    "LabelCanvas",
    "get_font_manager",
    "image_to_mono",
    "to_mono",
]
