"""Font lookup for ZPL font identifiers."""

import logging
from collections.abc import Sequence
from pathlib import Path

from PIL import ImageFont

logger = logging.getLogger(__name__)

# Common system font directories by platform
SYSTEM_FONT_DIRS = [
    # Linux
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path.home() / ".fonts",
    Path.home() / ".local/share/fonts",
    # macOS
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path.home() / "Library/Fonts",
    # Windows
    Path("C:/Windows/Fonts"),
]

# ZPL font identifiers are approximated with one sans-serif face
DEFAULT_FACE = "DejaVuSans"
ZPL_FONTS = {font_id: DEFAULT_FACE for font_id in "0ABCDEFGH"}

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont


class FontManager:
    """Resolves ZPL font ids to PIL fonts with caching.

    Search order:
    1. User-specified custom paths
    2. System fonts
    3. PIL default font (fallback)
    """

    def __init__(self, custom_paths: Sequence[str | Path] | None = None) -> None:
        self._custom_paths = [Path(p) for p in (custom_paths or [])]
        self._cache: dict[tuple[str, int], FontType] = {}
        self._path_cache: dict[str, Path | None] = {}

    def get_font(self, font_id: str, size: int) -> FontType:
        """Get a font for a ZPL font id at the given pixel height.

        Args:
            font_id: ZPL font identifier ("0", "A".."H"); unknown ids use font 0.
            size: Font height in pixels.

        Returns:
            PIL font object
        """
        name = ZPL_FONTS.get(font_id.upper(), ZPL_FONTS["0"])
        size = max(1, size)

        cache_key = (name, size)
        if cache_key in self._cache:
            return self._cache[cache_key]

        font_path = self._find_font(name)
        if font_path:
            try:
                font = ImageFont.truetype(str(font_path), size)
                self._cache[cache_key] = font
                return font
            except OSError as e:
                logger.warning(f"Failed to load font {font_path}: {e}")

        logger.debug(f"Font '{name}' not found, using PIL default")
        font = ImageFont.load_default(size)
        self._cache[cache_key] = font
        return font

    def _find_font(self, name: str) -> Path | None:
        """Find font file path by name (without extension)."""
        if name in self._path_cache:
            return self._path_cache[name]

        extensions = [".ttf", ".otf", ".TTF", ".OTF"]

        for custom_path in self._custom_paths:
            if custom_path.is_file() and custom_path.stem == name:
                self._path_cache[name] = custom_path
                return custom_path
            if custom_path.is_dir():
                for ext in extensions:
                    font_file = custom_path / f"{name}{ext}"
                    if font_file.exists():
                        self._path_cache[name] = font_file
                        return font_file

        for sys_dir in SYSTEM_FONT_DIRS:
            if not sys_dir.exists():
                continue
            try:
                for font_file in sys_dir.rglob(f"{name}.*"):
                    if font_file.suffix.lower() in [".ttf", ".otf"]:
                        self._path_cache[name] = font_file
                        logger.debug(f"Found font '{name}' at {font_file}")
                        return font_file
            except PermissionError:
                continue

        self._path_cache[name] = None
        return None


# Default font manager instance
_default_manager: FontManager | None = None


def get_font_manager(custom_paths: Sequence[str | Path] | None = None) -> FontManager:
    """Get or create font manager.

    Args:
        custom_paths: Additional paths to search for fonts.

    Returns:
        FontManager instance
    """
    global _default_manager

    if custom_paths:
        return FontManager(custom_paths)

    if _default_manager is None:
        _default_manager = FontManager()

    return _default_manager
