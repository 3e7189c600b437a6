"""Code 128 (subset B) module patterns."""

from thermalabel.rendering.canvas import BLACK, LabelCanvas

START_B = "11010010000"
STOP = "1100011101011"

# Printable subset: space through 'Z'
CODE128B_PATTERNS = {
    " ": "11011001100", "!": "11001101100", '"': "11001100110",
    "#": "10010011000", "$": "10010001100", "%": "10001001100",
    "&": "10011001000", "'": "10011000100", "(": "10001100100",
    ")": "11001001000", "*": "11001000100", "+": "11000100100",
    ",": "10110011100", "-": "10011011100", ".": "10011001110",
    "/": "10111001100", "0": "10011101100", "1": "10011100110",
    "2": "11001110010", "3": "11001011100", "4": "11001001110",
    "5": "11011100100", "6": "11001110100", "7": "11101101110",
    "8": "11101001100", "9": "11100101100", ":": "11100100110",
    ";": "11101100100", "<": "11100110100", "=": "11100110010",
    ">": "11011011000", "?": "11011000110", "@": "11000110110",
    "A": "10100011000", "B": "10001011000", "C": "10001000110",
    "D": "10110001000", "E": "10001101000", "F": "10001100010",
    "G": "11010001000", "H": "11000101000", "I": "11000100010",
    "J": "10110111000", "K": "10110001110", "L": "10001101110",
    "M": "10111011000", "N": "10111000110", "O": "10001110110",
    "P": "11101110110", "Q": "11010001110", "R": "11000101110",
    "S": "11011101000", "T": "11011100010", "U": "11011101110",
    "V": "11101011000", "W": "11101000110", "X": "11100010110",
    "Y": "11101101000", "Z": "11101100010",
}  # fmt: skip


def encode_code128b(data: str) -> list[str]:
    """Encode text as Code 128 subset B module patterns.

    Characters outside the table are skipped. No check character is added.

    Args:
        data: Text to encode.

    Returns:
        Start pattern, one 11-module pattern per supported character, stop pattern.
    """
    patterns = [START_B]
    patterns.extend(CODE128B_PATTERNS[c] for c in data if c in CODE128B_PATTERNS)
    patterns.append(STOP)
    return patterns


def draw_code128b(
    canvas: LabelCanvas,
    data: str,
    x: int,
    y: int,
    height: int,
    module_width: int = 2,
) -> int:
    """Draw a Code 128 subset B barcode as vertical bars.

    Returns:
        Total barcode width in dots.
    """
    cursor = x
    for pattern in encode_code128b(data):
        for module in pattern:
            if module == "1":
                canvas.fill_rect(cursor, y, module_width, height, BLACK)
            cursor += module_width
    return cursor - x
