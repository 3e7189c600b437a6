"""Print job orchestration for Phomemo-style raster label printers."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from thermalabel.engine import RenderedLabel
from thermalabel.models.label import MAX_WIDTH_PX
from thermalabel.models.printer import PrinterConfig
from thermalabel.protocol.raster import DEFAULT_FEED_MM, encode_feed, encode_label
from thermalabel.transports import create_transport
from thermalabel.transports.base import BaseTransport, NotConnectedError
from thermalabel.transports.chunker import DEFAULT_CHUNK_DELAY, DEFAULT_CHUNK_SIZE, send_chunked

logger = logging.getLogger(__name__)

DEFAULT_COPY_DELAY = 0.5

ProgressCallback = Callable[[float], None]
CopyProgressCallback = Callable[[int, int, float], None]


def build_test_pattern(width: int = MAX_WIDTH_PX, height: int = 50) -> bytes:
    """Build a packed bitmap with a 2-dot black border and diagonal stripes."""
    row_bytes = (width + 7) // 8
    bitmap = bytearray(row_bytes * height)

    for y in range(2, height - 2):
        for x in range(2, width - 2):
            if (x + y) % 8 < 4:
                bitmap[y * row_bytes + (x >> 3)] |= 1 << (7 - (x & 7))

    return bytes(bitmap)


class LabelPrinter:
    """Sends encoded labels to a printer over a transport.

    One job runs at a time; starting another while a job is active raises
    PrinterBusyError. A failed job is not resumed or retried.
    """

    def __init__(
        self,
        transport: BaseTransport,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_delay: float = DEFAULT_CHUNK_DELAY,
        copy_delay: float = DEFAULT_COPY_DELAY,
        feed_mm: float = DEFAULT_FEED_MM,
    ) -> None:
        self.transport = transport
        self.chunk_size = chunk_size
        self.chunk_delay = chunk_delay
        self.copy_delay = copy_delay
        self.feed_mm = feed_mm
        self._busy = False

    @classmethod
    def from_config(cls, config: PrinterConfig) -> "LabelPrinter":
        """Create a printer and its transport from configuration."""
        return cls(
            create_transport(config),
            chunk_size=config.chunk_size,
            chunk_delay=config.chunk_delay,
            copy_delay=config.copy_delay,
            feed_mm=config.feed_mm,
        )

    @property
    def is_connected(self) -> bool:
        return self.transport.is_connected

    @property
    def is_busy(self) -> bool:
        return self._busy

    @asynccontextmanager
    async def _job(self, description: str) -> AsyncIterator[None]:
        if self._busy:
            raise PrinterBusyError(f"Printer {self.transport.name} is busy")
        if not self.transport.is_connected:
            raise NotConnectedError("Printer not connected")

        self._busy = True
        logger.info(f"Printer {self.transport.name}: {description} started")
        try:
            yield
        except Exception as e:
            logger.error(f"Printer {self.transport.name}: {description} failed - {e}")
            raise
        finally:
            self._busy = False
        logger.info(f"Printer {self.transport.name}: {description} complete")

    async def _send_label(
        self,
        bitmap: bytes,
        width: int,
        height: int,
        on_progress: ProgressCallback | None,
    ) -> None:
        data = encode_label(bitmap, width, height, feed_mm=self.feed_mm)
        if on_progress:
            on_progress(0.0)
        await send_chunked(
            self.transport,
            data,
            chunk_size=self.chunk_size,
            chunk_delay=self.chunk_delay,
            on_progress=on_progress,
        )
        if on_progress:
            on_progress(1.0)

    async def print_bitmap(
        self,
        bitmap: bytes,
        width: int,
        height: int,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Print one packed monochrome bitmap.

        Args:
            bitmap: Packed bitmap, MSB first, 1 bit = white.
            width: Width in pixels.
            height: Height in pixels.
            on_progress: Optional callback with progress 0-1.

        Raises:
            NotConnectedError: If the transport is not connected.
            LabelSizeError: If the width exceeds the printable maximum.
            TransportError: If transmission fails.
            PrinterBusyError: If another job is running.
        """
        async with self._job(f"print {width}x{height}"):
            await self._send_label(bitmap, width, height, on_progress)

    async def print_copies(
        self,
        bitmap: bytes,
        width: int,
        height: int,
        copies: int,
        on_progress: CopyProgressCallback | None = None,
    ) -> None:
        """Print several copies, sending the full stream once per copy.

        Args:
            bitmap: Packed bitmap, MSB first, 1 bit = white.
            width: Width in pixels.
            height: Height in pixels.
            copies: Number of copies (at least 1).
            on_progress: Optional callback (copy_index, copy_total, fraction),
                copy_index starting at 1.
        """
        if copies < 1:
            raise ValueError(f"copies must be at least 1, got {copies}")

        async with self._job(f"print {copies} copies of {width}x{height}"):
            for i in range(copies):

                def copy_progress(fraction: float, index: int = i + 1) -> None:
                    if on_progress:
                        on_progress(index, copies, fraction)

                await self._send_label(bitmap, width, height, copy_progress)

                if i < copies - 1 and self.copy_delay > 0:
                    await asyncio.sleep(self.copy_delay)

    async def print_label(
        self,
        label: RenderedLabel,
        copies: int = 1,
        on_progress: CopyProgressCallback | None = None,
    ) -> None:
        """Print a rendered label."""
        await self.print_copies(label.bitmap, label.width, label.height, copies, on_progress)

    async def feed_paper(self, mm: float = 5.0) -> None:
        """Feed paper without printing."""
        async with self._job(f"feed {mm}mm"):
            await send_chunked(self.transport, encode_feed(mm), chunk_size=self.chunk_size, chunk_delay=0)

    async def print_test(self) -> None:
        """Print a full-width border and stripe test pattern."""
        height = 50
        await self.print_bitmap(build_test_pattern(MAX_WIDTH_PX, height), MAX_WIDTH_PX, height)


class PrinterError(Exception):
    """Exception raised for print job errors."""

    pass


class PrinterBusyError(PrinterError):
    """Exception raised when a job is submitted while another is running."""

    pass
