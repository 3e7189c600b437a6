"""Serial port transport (USB serial or Bluetooth RFCOMM device)."""

import asyncio
import logging

import serial

from thermalabel.models.printer import SerialConnection
from thermalabel.transports.base import BaseTransport, NotConnectedError, TransportError

logger = logging.getLogger(__name__)


class SerialTransport(BaseTransport):
    """Writes to a printer over a serial port using pyserial."""

    def __init__(self, conn: SerialConnection, name: str = "serial") -> None:
        super().__init__(name)
        self.conn = conn
        self._serial: serial.Serial | None = None

    async def connect(self) -> None:
        """Open the serial port."""
        if self._connected:
            return
        try:
            self._serial = serial.Serial(
                port=self.conn.device,
                baudrate=self.conn.baudrate,
                bytesize=self.conn.bytesize,
                parity=self.conn.parity,
                stopbits=self.conn.stopbits,
                timeout=5.0,
            )
        except serial.SerialException as e:
            raise TransportError(f"Failed to open serial port {self.conn.device}: {e}") from e

        self._connected = True
        logger.info(f"Transport {self.name}: opened {self.conn.device}")

    async def disconnect(self) -> None:
        """Close the serial port."""
        if self._serial:
            self._serial.close()
            self._serial = None
        self._connected = False

    async def write(self, data: bytes) -> None:
        """Write data, running the blocking serial call in an executor."""
        if not self._connected or not self._serial:
            raise NotConnectedError("Serial port not open")

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._serial.write, data)
        except serial.SerialException as e:
            self._connected = False
            raise TransportError(f"Serial write failed: {e}") from e
