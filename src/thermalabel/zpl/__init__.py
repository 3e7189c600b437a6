"""ZPL parsing and interpretation."""

from thermalabel.zpl.code128 import draw_code128b, encode_code128b
from thermalabel.zpl.graphic_field import decode_compressed_hex, parse_graphic_field
from thermalabel.zpl.interpreter import LabelInterpreter, RenderResult, interpret
from thermalabel.zpl.parser import CommandRecord, CommandSequence, parse_zpl

__all__ = [
    "CommandRecord",
    "CommandSequence",
    "LabelInterpreter",
    "RenderResult",
    "decode_compressed_hex",
    "draw_code128b",
    "encode_code128b",
    "interpret",
    "parse_graphic_field",
    "parse_zpl",
]
