"""Supported ZPL command names."""

from enum import StrEnum


class Command(StrEnum):
    """ZPL commands understood by the interpreter."""

    START_FORMAT = "XA"
    END_FORMAT = "XZ"
    FIELD_ORIGIN = "FO"
    FIELD_DATA = "FD"
    FIELD_SEPARATOR = "FS"
    FONT = "A"
    CHANGE_FONT = "CF"
    FIELD_BLOCK = "FB"
    GRAPHIC_BOX = "GB"
    GRAPHIC_FIELD = "GF"
    BARCODE_DEFAULTS = "BY"
    CODE128 = "BC"
    QR_CODE = "BQ"
    FIELD_REVERSE = "FR"
    LABEL_HOME = "LH"
    LABEL_LENGTH = "LL"
    PRINT_WIDTH = "PW"
    FIELD_ORIENTATION = "FW"


def resolve_command(name: str) -> tuple[Command | None, str]:
    """Map a parsed command name to a Command.

    ^A takes its font id as the character right after the command letter,
    so a two-letter name starting with "A" (e.g. "AD") is the font command
    with the second letter folded back into the parameters.

    Args:
        name: Uppercase command name from the parser.

    Returns:
        Tuple of (command or None if unknown, parameter prefix to prepend).
    """
    try:
        return Command(name), ""
    except ValueError:
        pass

    if len(name) == 2 and name[0] == "A":
        return Command.FONT, name[1]

    return None, ""
