"""Tests for print job orchestration."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from conftest import MockTransport

from thermalabel.engine import LabelEngine
from thermalabel.models.label import LabelDimensions, LabelSizeError
from thermalabel.models.printer import PrinterConfig, TCPConnection
from thermalabel.printer import LabelPrinter, PrinterBusyError, build_test_pattern
from thermalabel.protocol.raster import encode_label
from thermalabel.transports.base import NotConnectedError, TransportError
from thermalabel.transports.tcp import TCPTransport


class BlockingTransport(MockTransport):
    """Mock transport whose writes wait until released."""

    def __init__(self):
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def write(self, data: bytes) -> None:
        self.started.set()
        await self.release.wait()
        await super().write(data)


@pytest.fixture
def printer(transport) -> LabelPrinter:
    return LabelPrinter(transport, chunk_delay=0, copy_delay=0)


BITMAP = bytes([0xAA]) * (40 * 10)


class TestPrintBitmap:
    """Tests for single-label printing."""

    @pytest.mark.asyncio
    async def test_sends_encoded_stream(self, printer, transport):
        await printer.print_bitmap(BITMAP, 320, 10)

        assert transport.data == encode_label(BITMAP, 320, 10)
        assert all(len(w) <= 100 for w in transport.writes)

    @pytest.mark.asyncio
    async def test_custom_chunk_size_and_feed(self, transport):
        printer = LabelPrinter(transport, chunk_size=32, chunk_delay=0, feed_mm=2)

        await printer.print_bitmap(BITMAP, 320, 10)

        assert max(len(w) for w in transport.writes) == 32
        assert transport.data.endswith(b"\x1b\x4a\x10")

    @pytest.mark.asyncio
    async def test_progress_reaches_one(self, printer):
        progress: list[float] = []

        await printer.print_bitmap(BITMAP, 320, 10, on_progress=progress.append)

        assert progress[0] == 0.0
        assert progress[-1] == 1.0
        assert progress == sorted(progress)

    @pytest.mark.asyncio
    async def test_not_connected(self):
        printer = LabelPrinter(MockTransport(connected=False))

        with pytest.raises(NotConnectedError):
            await printer.print_bitmap(BITMAP, 320, 10)

        assert not printer.is_busy

    @pytest.mark.asyncio
    async def test_width_too_large(self, printer, transport):
        with pytest.raises(LabelSizeError):
            await printer.print_bitmap(b"\x00" * 49, 385, 1)

        assert transport.writes == []
        assert not printer.is_busy

    @pytest.mark.asyncio
    async def test_transport_failure_releases_printer(self):
        transport = MockTransport(fail_at=2)
        printer = LabelPrinter(transport, chunk_delay=0)

        with pytest.raises(TransportError) as exc_info:
            await printer.print_bitmap(BITMAP, 320, 10)

        assert exc_info.value.chunk_index == 2
        assert not printer.is_busy


class TestBusy:
    """Tests for single-job enforcement."""

    @pytest.mark.asyncio
    async def test_second_job_rejected(self):
        transport = BlockingTransport()
        printer = LabelPrinter(transport, chunk_delay=0)

        job = asyncio.create_task(printer.print_bitmap(BITMAP, 320, 10))
        await transport.started.wait()

        assert printer.is_busy
        with pytest.raises(PrinterBusyError):
            await printer.feed_paper()

        transport.release.set()
        await job

        assert not printer.is_busy
        assert transport.data == encode_label(BITMAP, 320, 10)


class TestCopies:
    """Tests for multi-copy printing."""

    @pytest.mark.asyncio
    async def test_stream_sent_per_copy(self, printer, transport):
        await printer.print_copies(BITMAP, 320, 10, copies=3)

        assert transport.data == encode_label(BITMAP, 320, 10) * 3

    @pytest.mark.asyncio
    async def test_copy_progress(self, printer):
        events: list[tuple[int, int, float]] = []

        await printer.print_copies(BITMAP, 320, 10, copies=2, on_progress=lambda *args: events.append(args))

        assert events[0] == (1, 2, 0.0)
        assert (1, 2, 1.0) in events
        assert events[-1] == (2, 2, 1.0)
        assert [e[0] for e in events] == sorted(e[0] for e in events)

    @pytest.mark.asyncio
    async def test_pause_between_copies(self, transport):
        printer = LabelPrinter(transport, chunk_delay=0, copy_delay=0.5)

        with patch("thermalabel.printer.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await printer.print_copies(BITMAP, 320, 10, copies=3)

        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)

    @pytest.mark.asyncio
    async def test_zero_copies(self, printer):
        with pytest.raises(ValueError):
            await printer.print_copies(BITMAP, 320, 10, copies=0)

    @pytest.mark.asyncio
    async def test_print_rendered_label(self, printer, transport):
        label = LabelEngine().render("^XA^FO10,10^GB50,50,50^FS^XZ", LabelDimensions(width_mm=40, height_mm=30))

        await printer.print_label(label, copies=2)

        assert transport.data == encode_label(label.bitmap, 320, 240) * 2


class TestUtilityJobs:
    """Tests for feed and test pattern jobs."""

    @pytest.mark.asyncio
    async def test_feed(self, printer, transport):
        await printer.feed_paper(5)

        assert transport.data == b"\x1b\x4a\x28"

    @pytest.mark.asyncio
    async def test_test_pattern(self, printer, transport):
        await printer.print_test()

        assert transport.data == encode_label(build_test_pattern(), 384, 50)

    def test_pattern_border_is_black(self):
        pattern = build_test_pattern(16, 8)

        # Two black border rows and columns (0 bits)
        assert pattern[0:2] == b"\x00\x00"
        assert pattern[2:4] == b"\x00\x00"
        assert pattern[4] & 0xC0 == 0
        assert len(pattern) == 16


class TestFromConfig:
    """Tests for building a printer from configuration."""

    def test_tcp(self):
        config = PrinterConfig(
            name="shelf",
            connection=TCPConnection(host="192.168.1.50"),
            chunk_size=200,
            feed_mm=3,
        )

        printer = LabelPrinter.from_config(config)

        assert isinstance(printer.transport, TCPTransport)
        assert printer.transport.name == "shelf"
        assert printer.chunk_size == 200
        assert printer.feed_mm == 3
        assert not printer.is_connected
