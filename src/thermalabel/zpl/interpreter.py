"""ZPL interpreter that executes command records against a label canvas."""

import logging
import re
from collections.abc import Callable, Iterable

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

from thermalabel.rendering.canvas import BLACK, WHITE, LabelCanvas
from thermalabel.rendering.fonts import FontManager, get_font_manager
from thermalabel.zpl.commands import Command, resolve_command
from thermalabel.zpl.graphic_field import parse_graphic_field
from thermalabel.zpl.parser import CommandRecord
from thermalabel.zpl.state import InterpreterState, Orientation, PendingBarcode

logger = logging.getLogger(__name__)

# ^A font id, orientation, height, width (e.g. "0N,30,30")
FONT_PATTERN = re.compile(r"^([A-Z0-9])?([NRIB])?(?:,(\d+))?(?:,(\d+))?", re.IGNORECASE)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

Handler = Callable[[InterpreterState, LabelCanvas, str], None]


def _leading_int(value: str) -> int | None:
    """Integer value of the leading digits of value, or None."""
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _int_param(value: str, name: str) -> int:
    """Parse a required integer parameter."""
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"invalid {name} '{value}'") from None


def _part(parts: list[str], index: int) -> str:
    """Get a stripped comma-separated parameter, empty if absent."""
    return parts[index].strip() if index < len(parts) else ""


class RenderResult(BaseModel):
    """Best-effort render of a label plus per-command diagnostics."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    canvas: LabelCanvas
    state: InterpreterState
    diagnostics: list[str] = Field(default_factory=list)

    @property
    def image(self) -> Image.Image:
        return self.canvas.image


class LabelInterpreter:
    """Executes ZPL command records in order against a fresh canvas.

    Each call to interpret() starts from default state. A command that fails
    adds a diagnostic and rendering continues with the next record.
    """

    def __init__(self, font_manager: FontManager | None = None) -> None:
        self.font_manager = font_manager or get_font_manager()
        self._handlers: dict[Command, Handler] = {
            Command.START_FORMAT: self._noop,
            Command.END_FORMAT: self._noop,
            Command.FIELD_SEPARATOR: self._noop,
            Command.LABEL_LENGTH: self._noop,
            Command.PRINT_WIDTH: self._noop,
            Command.FIELD_ORIGIN: self._field_origin,
            Command.FIELD_DATA: self._field_data,
            Command.FONT: self._font,
            Command.CHANGE_FONT: self._change_font,
            Command.FIELD_BLOCK: self._field_block,
            Command.GRAPHIC_BOX: self._graphic_box,
            Command.GRAPHIC_FIELD: self._graphic_field,
            Command.BARCODE_DEFAULTS: self._barcode_defaults,
            Command.CODE128: self._code128,
            Command.QR_CODE: self._qr_code,
            Command.FIELD_REVERSE: self._field_reverse,
            Command.LABEL_HOME: self._label_home,
            Command.FIELD_ORIENTATION: self._field_orientation,
        }

    def interpret(self, records: Iterable[CommandRecord], width: int, height: int) -> RenderResult:
        """Render command records onto a new width x height canvas.

        Args:
            records: Parsed commands in render order.
            width: Canvas width in dots.
            height: Canvas height in dots.

        Returns:
            RenderResult with the canvas and diagnostics ("<command>: <detail>").

        Raises:
            LabelSizeError: If width exceeds the print head.
        """
        canvas = LabelCanvas(width, height, self.font_manager)
        state = InterpreterState()
        diagnostics: list[str] = []

        for record in records:
            command, prefix = resolve_command(record.name)
            if command is None:
                diagnostics.append(f"{record.name}: unknown command")
                logger.debug(f"Unknown ZPL command: {record.name}")
                continue

            try:
                self._handlers[command](state, canvas, prefix + record.params)
            except Exception as e:
                diagnostics.append(f"{record.name}: {e}")
                logger.debug(f"ZPL command {record.name} failed: {e}")

        return RenderResult(canvas=canvas, state=state, diagnostics=diagnostics)

    def _noop(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        pass

    def _field_origin(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        parts = params.split(",")
        state.x = max(0, _leading_int(_part(parts, 0)) or 0)
        state.y = max(0, _leading_int(_part(parts, 1)) or 0)
        state.field_reverse = False

    def _font(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        match = FONT_PATTERN.match(params)
        if not match:
            return
        font, orientation, height, width = match.groups()
        if font:
            state.font = font.upper()
        if orientation:
            state.orientation = Orientation.from_letter(orientation)
        if height:
            state.font_height = int(height)
            state.font_width = int(width) if width else state.font_height

    def _change_font(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        parts = params.split(",")
        if _part(parts, 0):
            state.font = _part(parts, 0).upper()
        if _part(parts, 1):
            state.font_height = _int_param(_part(parts, 1), "font height")
            state.font_width = state.font_height
        if _part(parts, 2):
            state.font_width = _int_param(_part(parts, 2), "font width")

    def _field_data(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        text = params.replace("\\&", "&").replace("\\\\", "\\")
        if state.pending_barcode is not None:
            logger.debug(f"Field data after pending {state.pending_barcode.type} barcode drawn as text")
        try:
            canvas.draw_text(
                text,
                state.x,
                state.y,
                font_id=state.font,
                height=state.font_height,
                width=state.font_width,
                rotation=state.rotation,
                reverse=state.field_reverse,
            )
        finally:
            state.field_reverse = False

    def _field_block(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        parts = params.split(",")
        state.block_width = _leading_int(_part(parts, 0)) or canvas.width

    def _graphic_box(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        parts = params.split(",")
        width = _leading_int(_part(parts, 0)) or 1
        height = _leading_int(_part(parts, 1)) or 1
        thickness = _leading_int(_part(parts, 2)) or 1
        color = WHITE if (_part(parts, 3) or "B").upper() == "W" else BLACK
        rounding = _leading_int(_part(parts, 4)) or 0

        solid = thickness >= min(width, height) / 2

        if rounding > 0:
            radius = min(rounding, width / 2, height / 2)
            canvas.rounded_rect(
                state.x,
                state.y,
                width,
                height,
                radius,
                color,
                thickness=None if solid else thickness,
            )
        elif solid:
            canvas.fill_rect(state.x, state.y, width, height, color)
        else:
            canvas.stroke_rect(state.x, state.y, width, height, thickness, color)

    def _graphic_field(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        field = parse_graphic_field(params)
        canvas.blit_bitmap(field.data, field.row_bytes, field.rows, state.x, state.y)

    def _barcode_defaults(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        parts = params.split(",")
        if _part(parts, 0):
            state.barcode_module_width = _int_param(_part(parts, 0), "module width")
        if _part(parts, 1):
            try:
                state.barcode_ratio = float(_part(parts, 1))
            except ValueError:
                raise ValueError(f"invalid wide to narrow ratio '{_part(parts, 1)}'") from None
        if _part(parts, 2):
            state.barcode_height = _int_param(_part(parts, 2), "barcode height")

    def _code128(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        # Recorded only; the following ^FD is drawn as plain text
        parts = params.split(",")
        state.pending_barcode = PendingBarcode(
            type="128",
            orientation=_part(parts, 0) or "N",
            height=_leading_int(_part(parts, 1)) or state.barcode_height,
            module_width=state.barcode_module_width,
            print_text=(_part(parts, 2) or "Y").upper() == "Y",
            text_above=(_part(parts, 3) or "N").upper() == "Y",
            x=state.x,
            y=state.y,
        )

    def _qr_code(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        parts = params.split(",")
        state.pending_barcode = PendingBarcode(
            type="QR",
            orientation=_part(parts, 0) or "N",
            model=_leading_int(_part(parts, 1)) or 2,
            magnification=_leading_int(_part(parts, 2)) or 3,
            x=state.x,
            y=state.y,
        )

    def _field_reverse(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        state.field_reverse = True

    def _label_home(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        # Stored but not applied to drawing
        parts = params.split(",")
        state.label_home_x = _leading_int(_part(parts, 0)) or 0
        state.label_home_y = _leading_int(_part(parts, 1)) or 0

    def _field_orientation(self, state: InterpreterState, canvas: LabelCanvas, params: str) -> None:
        if params:
            state.orientation = Orientation.from_letter(params[0])


def interpret(records: Iterable[CommandRecord], width: int, height: int) -> RenderResult:
    """Render command records with a default interpreter."""
    return LabelInterpreter().interpret(records, width, height)
