"""Grayscale to packed 1-bit bitmap conversion."""

from collections.abc import Sequence

from PIL import Image

THRESHOLD = 128


def luminance(r: int, g: int, b: int) -> float:
    """Perceived luminance of an RGB pixel (ITU-R BT.601 weights)."""
    # Integer weights keep mid-gray exact (128, 128, 128) -> 128.0
    return (299 * r + 587 * g + 114 * b) / 1000


def image_to_luminance(image: Image.Image) -> list[float]:
    """Extract per-pixel luminance from a PIL image, row-major."""
    if image.mode == "L":
        return [float(p) for p in image.tobytes()]
    if image.mode == "1":
        return [255.0 if p else 0.0 for p in image.convert("L").tobytes()]

    rgb = image.convert("RGB").tobytes()
    return [luminance(rgb[i], rgb[i + 1], rgb[i + 2]) for i in range(0, len(rgb), 3)]


def to_mono(pixels: Sequence[float], width: int, height: int, dither: bool = True) -> bytes:
    """Convert luminance values to a packed monochrome bitmap.

    Without dithering each pixel is thresholded at 128 (inclusive = white).
    With dithering, Floyd-Steinberg error diffusion is applied over a
    row-major scan.

    Args:
        pixels: Row-major luminance values (0 = black, 255 = white).
        width: Image width in pixels.
        height: Image height in pixels.
        dither: Whether to apply error diffusion.

    Returns:
        Bitmap with ceil(width / 8) bytes per row, MSB first,
        1 bit = white, 0 bit = black. Unused trailing bits are zero.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Bitmap size must be positive, got {width}x{height}")
    if len(pixels) != width * height:
        raise ValueError(f"Expected {width * height} pixels, got {len(pixels)}")

    gray = list(pixels)

    if dither:
        for y in range(height):
            row = y * width
            below = row + width
            for x in range(width):
                idx = row + x
                old = gray[idx]
                new = 0.0 if old < THRESHOLD else 255.0
                gray[idx] = new
                error = old - new

                if x + 1 < width:
                    gray[idx + 1] += error * 7 / 16
                if y + 1 < height:
                    if x > 0:
                        gray[below + x - 1] += error * 3 / 16
                    gray[below + x] += error * 5 / 16
                    if x + 1 < width:
                        gray[below + x + 1] += error * 1 / 16

    row_bytes = (width + 7) // 8
    bitmap = bytearray(row_bytes * height)

    for y in range(height):
        for x in range(width):
            # White pixel = 1, black pixel = 0
            if gray[y * width + x] >= THRESHOLD:
                bitmap[y * row_bytes + (x >> 3)] |= 1 << (7 - (x & 7))

    return bytes(bitmap)


def image_to_mono(image: Image.Image, dither: bool = True) -> bytes:
    """Convert a PIL image to a packed monochrome bitmap.

    Args:
        image: Source image in any mode.
        dither: Whether to apply Floyd-Steinberg dithering.

    Returns:
        Packed bitmap, see to_mono.
    """
    width, height = image.size
    return to_mono(image_to_luminance(image), width, height, dither)
