"""Command-line entry point for thermalabel."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from thermalabel.config import AppConfig, ConfigError, load_config, settings
from thermalabel.engine import LabelEngine, RenderedLabel
from thermalabel.models.label import LabelDimensions, LabelSizeError
from thermalabel.printer import LabelPrinter, PrinterError
from thermalabel.protocol.raster import DEFAULT_FEED_MM, encode_label
from thermalabel.transports.base import TransportError


def _add_label_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("zpl", help="ZPL file to render ('-' for stdin)")
    parser.add_argument("--label", help="Label preset name from config (default: config default_label)")
    parser.add_argument("--width-mm", type=float, help="Label width in mm (overrides --label)")
    parser.add_argument("--height-mm", type=float, help="Label height in mm (overrides --label)")
    parser.add_argument("--no-dither", action="store_true", help="Threshold instead of dithering")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render ZPL labels and print them on Phomemo-style thermal printers.",
        prog="thermalabel",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help=f"Config file (default: {settings.config_file})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a label to a preview image or printer stream")
    _add_label_args(render)
    render.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("preview.png"),
        help="Output file path (default: preview.png)",
    )
    render.add_argument(
        "--format",
        choices=["png", "bin"],
        default="png",
        help="png preview or raw printer command stream (default: png)",
    )

    print_cmd = sub.add_parser("print", help="Render and print a label")
    _add_label_args(print_cmd)
    print_cmd.add_argument("-n", "--copies", type=int, default=1, help="Number of copies (default: 1)")

    feed = sub.add_parser("feed", help="Feed paper without printing")
    feed.add_argument("--mm", type=float, default=5.0, help="Distance in mm (default: 5)")

    sub.add_parser("test", help="Print a test pattern")

    return parser


def _read_zpl(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text()


def _resolve_dimensions(args: argparse.Namespace, config: AppConfig) -> LabelDimensions:
    preset = config.get_label(args.label)
    return LabelDimensions(
        width_mm=args.width_mm if args.width_mm is not None else preset.width_mm,
        height_mm=args.height_mm if args.height_mm is not None else preset.height_mm,
    )


def _render(args: argparse.Namespace, config: AppConfig) -> RenderedLabel:
    engine = LabelEngine(custom_font_paths=config.font_paths or None)
    dither = config.dither and not args.no_dither
    label = engine.render(_read_zpl(args.zpl), _resolve_dimensions(args, config), dither=dither)
    for diagnostic in label.diagnostics:
        print(f"Warning: {diagnostic}", file=sys.stderr)
    return label


def _print_progress(copy_index: int, copy_total: int, fraction: float) -> None:
    print(f"\rPrinting {copy_index}/{copy_total}... {round(fraction * 100)}%", end="", file=sys.stderr)
    if copy_index == copy_total and fraction >= 1.0:
        print(file=sys.stderr)


async def _run_printer(args: argparse.Namespace, config: AppConfig) -> None:
    if config.printer is None:
        raise ConfigError("No printer configured")

    label = _render(args, config) if args.command == "print" else None

    printer = LabelPrinter.from_config(config.printer)
    async with printer.transport:
        if args.command == "print":
            await printer.print_label(label, copies=args.copies, on_progress=_print_progress)
        elif args.command == "feed":
            await printer.feed_paper(args.mm)
        else:
            await printer.print_test()


def main() -> int:
    """Main entry point for the thermalabel CLI."""
    args = _build_parser().parse_args()

    log_level = logging.DEBUG if (settings.debug or args.debug) else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config(args.config or settings.config_file)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "render":
            label = _render(args, config)
            if args.format == "png":
                output = label.to_mono_image()
                output.save(args.output, format="PNG")
            else:
                feed_mm = config.printer.feed_mm if config.printer else DEFAULT_FEED_MM
                args.output.write_bytes(encode_label(label.bitmap, label.width, label.height, feed_mm=feed_mm))
            print(f"Rendered {label.width}x{label.height} label to {args.output}")
        else:
            asyncio.run(_run_printer(args, config))
    except (ConfigError, LabelSizeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (TransportError, PrinterError) as e:
        print(f"Print failed: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
