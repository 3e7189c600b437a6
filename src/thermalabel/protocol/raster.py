"""ESC/POS-style raster commands for Phomemo M110-family printers.

Stream layout for one label:
    ESC @            initialize
    ESC 3 0          line spacing 0
    GS v 0 m xL xH yL yH   raster bit image header (x = bytes per row)
    <bitmap>         row-major, 1 bit = black
    ESC J n          feed n dots
"""

import struct

from thermalabel.models.label import MAX_WIDTH_PX, LabelSizeError, mm_to_px

INIT = b"\x1b\x40"
LINE_SPACING_ZERO = b"\x1b\x33\x00"
RASTER_MODE = b"\x1d\x76\x30\x00"
FEED_DOTS = b"\x1b\x4a"

# Feed after print to clear the print head
DEFAULT_FEED_MM = 4.0


def build_init_command() -> bytes:
    """Initialize the printer and set line spacing to zero."""
    return INIT + LINE_SPACING_ZERO


def build_raster_header(width: int, height: int) -> bytes:
    """Build the GS v 0 raster header for a width x height bitmap."""
    row_bytes = (width + 7) // 8
    return RASTER_MODE + struct.pack("<HH", row_bytes, height)


def build_feed_command(dots: int) -> bytes:
    """Build ESC J n, clamping n to a single unsigned byte."""
    return FEED_DOTS + bytes([max(0, min(dots, 255))])


def invert_bitmap(bitmap: bytes) -> bytes:
    """Flip bitmap polarity (packed 1 = white to wire 1 = black)."""
    return bytes(b ^ 0xFF for b in bitmap)


def encode_label(
    bitmap: bytes,
    width: int,
    height: int,
    feed_mm: float = DEFAULT_FEED_MM,
) -> bytes:
    """Encode a packed monochrome bitmap as a complete print stream.

    Args:
        bitmap: Packed bitmap, MSB first, 1 bit = white.
        width: Bitmap width in pixels.
        height: Bitmap height in pixels.
        feed_mm: Paper feed after the label in millimeters.

    Returns:
        Printer command bytes.

    Raises:
        LabelSizeError: If the width exceeds the printable maximum.
        ValueError: If the bitmap size does not match the dimensions.
    """
    if width > MAX_WIDTH_PX:
        raise LabelSizeError(f"Image width ({width}px) exceeds maximum ({MAX_WIDTH_PX}px)")
    if width <= 0 or height <= 0:
        raise LabelSizeError(f"Image size must be positive, got {width}x{height}")
    if height > 0xFFFF:
        raise LabelSizeError(f"Image height ({height}px) exceeds raster header limit")

    row_bytes = (width + 7) // 8
    if len(bitmap) != row_bytes * height:
        raise ValueError(f"Bitmap has {len(bitmap)} bytes, expected {row_bytes * height} for {width}x{height}")

    return (
        build_init_command()
        + build_raster_header(width, height)
        + invert_bitmap(bitmap)
        + build_feed_command(mm_to_px(feed_mm))
    )


def encode_feed(mm: float) -> bytes:
    """Encode a feed-only command (no image) for the given distance."""
    return build_feed_command(mm_to_px(mm))


def extract_bitmap(stream: bytes) -> tuple[int, int, bytes]:
    """Recover (row_bytes, height, packed bitmap) from an encoded label stream.

    Inverse of encode_label, used for inspecting captured print jobs.

    Raises:
        ValueError: If the stream does not start with the expected header.
    """
    prefix = build_init_command() + RASTER_MODE
    if not stream.startswith(prefix):
        raise ValueError("Stream does not start with init and raster header")

    offset = len(prefix)
    row_bytes, height = struct.unpack_from("<HH", stream, offset)
    offset += 4
    end = offset + row_bytes * height
    if len(stream) < end:
        raise ValueError("Stream is shorter than the declared bitmap")

    return row_bytes, height, invert_bitmap(stream[offset:end])
