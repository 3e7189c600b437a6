"""Tests for printer byte transports."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import serial
from bleak.exc import BleakError

from thermalabel.models.printer import BluetoothConnection, PrinterConfig, SerialConnection, TCPConnection
from thermalabel.transports import create_transport
from thermalabel.transports.base import NotConnectedError, TransportError
from thermalabel.transports.bluetooth import BluetoothTransport
from thermalabel.transports.serial_port import SerialTransport
from thermalabel.transports.tcp import TCPTransport


class TestCreateTransport:
    """Tests for create_transport factory."""

    def test_serial(self):
        config = PrinterConfig(name="usb", connection=SerialConnection(device="/dev/ttyUSB0"))

        transport = create_transport(config)

        assert isinstance(transport, SerialTransport)
        assert transport.name == "usb"

    def test_tcp(self):
        transport = create_transport(PrinterConfig(connection=TCPConnection(host="localhost")))

        assert isinstance(transport, TCPTransport)

    def test_bluetooth(self):
        transport = create_transport(PrinterConfig(connection=BluetoothConnection(address="AA:BB:CC:DD:EE:FF")))

        assert isinstance(transport, BluetoothTransport)
        assert not transport.is_connected

    def test_from_dict(self):
        config = PrinterConfig.model_validate({"connection": {"type": "tcp", "host": "printer", "port": 9200}})

        transport = create_transport(config)

        assert transport.conn.port == 9200


class TestSerialTransport:
    """Tests for SerialTransport."""

    @pytest.mark.asyncio
    async def test_write_before_connect(self):
        transport = SerialTransport(SerialConnection(device="/dev/ttyUSB0"))

        with pytest.raises(NotConnectedError):
            await transport.write(b"data")

    @pytest.mark.asyncio
    async def test_connect_and_write(self):
        mock_port = MagicMock()

        with patch("thermalabel.transports.serial_port.serial.Serial", return_value=mock_port) as serial_cls:
            async with SerialTransport(SerialConnection(device="/dev/rfcomm0", baudrate=9600)) as transport:
                assert transport.is_connected
                await transport.write(b"\x1b\x40")

        assert serial_cls.call_args.kwargs["port"] == "/dev/rfcomm0"
        assert serial_cls.call_args.kwargs["baudrate"] == 9600
        mock_port.write.assert_called_once_with(b"\x1b\x40")
        mock_port.close.assert_called_once()
        assert not transport.is_connected

    @pytest.mark.asyncio
    async def test_open_failure(self):
        with patch(
            "thermalabel.transports.serial_port.serial.Serial",
            side_effect=serial.SerialException("no such device"),
        ):
            transport = SerialTransport(SerialConnection(device="/dev/missing"))
            with pytest.raises(TransportError, match="/dev/missing"):
                await transport.connect()

        assert not transport.is_connected


class TestTCPTransport:
    """Tests for TCPTransport."""

    @pytest.mark.asyncio
    async def test_write_before_connect(self):
        transport = TCPTransport(TCPConnection(host="localhost"))

        with pytest.raises(NotConnectedError):
            await transport.write(b"data")

    @pytest.mark.asyncio
    async def test_connect_and_write(self):
        writer = MagicMock()
        writer.drain = AsyncMock()
        writer.wait_closed = AsyncMock()

        with patch(
            "thermalabel.transports.tcp.asyncio.open_connection",
            new_callable=AsyncMock,
            return_value=(MagicMock(), writer),
        ):
            transport = TCPTransport(TCPConnection(host="bridge", port=9100))
            await transport.connect()
            await transport.write(b"abc")
            await transport.disconnect()

        writer.write.assert_called_once_with(b"abc")
        writer.drain.assert_awaited_once()
        writer.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        with patch(
            "thermalabel.transports.tcp.asyncio.open_connection",
            new_callable=AsyncMock,
            side_effect=ConnectionRefusedError("refused"),
        ):
            transport = TCPTransport(TCPConnection(host="bridge"))
            with pytest.raises(TransportError, match="bridge:9100"):
                await transport.connect()

    @pytest.mark.asyncio
    async def test_write_failure_disconnects(self):
        writer = MagicMock()
        writer.drain = AsyncMock(side_effect=ConnectionResetError("reset"))

        with patch(
            "thermalabel.transports.tcp.asyncio.open_connection",
            new_callable=AsyncMock,
            return_value=(MagicMock(), writer),
        ):
            transport = TCPTransport(TCPConnection(host="bridge"))
            await transport.connect()

            with pytest.raises(TransportError):
                await transport.write(b"abc")

        assert not transport.is_connected


class TestBluetoothTransport:
    """Tests for BluetoothTransport."""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.is_connected = True
        client.connect = AsyncMock()
        client.disconnect = AsyncMock()
        client.write_gatt_char = AsyncMock()
        return client

    @pytest.fixture
    def conn(self):
        return BluetoothConnection(address="AA:BB:CC:DD:EE:FF")

    @pytest.mark.asyncio
    async def test_write_without_response(self, client, conn):
        with patch("thermalabel.transports.bluetooth.BleakClient", return_value=client):
            transport = BluetoothTransport(conn)
            await transport.connect()
            await transport.write(b"\x1b\x40")

        client.write_gatt_char.assert_awaited_once_with(conn.write_characteristic, b"\x1b\x40", response=False)

    @pytest.mark.asyncio
    async def test_falls_back_to_write_with_response(self, client, conn):
        client.write_gatt_char.side_effect = [BleakError("not permitted"), None]

        with patch("thermalabel.transports.bluetooth.BleakClient", return_value=client):
            transport = BluetoothTransport(conn)
            await transport.connect()
            await transport.write(b"abc")

        assert client.write_gatt_char.await_count == 2
        assert client.write_gatt_char.await_args.kwargs["response"] is True

    @pytest.mark.asyncio
    async def test_both_write_modes_fail(self, client, conn):
        client.write_gatt_char.side_effect = BleakError("gone")

        with patch("thermalabel.transports.bluetooth.BleakClient", return_value=client):
            transport = BluetoothTransport(conn)
            await transport.connect()

            with pytest.raises(TransportError, match="Bluetooth write failed"):
                await transport.write(b"abc")

    @pytest.mark.asyncio
    async def test_connect_failure(self, client, conn):
        client.connect.side_effect = BleakError("device not found")

        with patch("thermalabel.transports.bluetooth.BleakClient", return_value=client):
            transport = BluetoothTransport(conn)
            with pytest.raises(TransportError, match="AA:BB:CC:DD:EE:FF"):
                await transport.connect()

        assert not transport.is_connected

    @pytest.mark.asyncio
    async def test_link_loss_reported_as_disconnected(self, client, conn):
        with patch("thermalabel.transports.bluetooth.BleakClient", return_value=client):
            transport = BluetoothTransport(conn)
            await transport.connect()

        client.is_connected = False

        assert not transport.is_connected
        with pytest.raises(NotConnectedError):
            await transport.write(b"abc")

    @pytest.mark.asyncio
    async def test_disconnect(self, client, conn):
        with patch("thermalabel.transports.bluetooth.BleakClient", return_value=client):
            transport = BluetoothTransport(conn)
            await transport.connect()
            await transport.disconnect()

        client.disconnect.assert_awaited_once()
        assert not transport.is_connected
