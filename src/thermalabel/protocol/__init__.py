"""Printer wire protocol."""

from thermalabel.protocol.raster import encode_feed, encode_label, extract_bitmap, invert_bitmap

__all__ = [
    "encode_feed",
    "encode_label",
    "extract_bitmap",
    "invert_bitmap",
]
