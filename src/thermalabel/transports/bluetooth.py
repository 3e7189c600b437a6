"""Bluetooth LE transport for a printer with a known address."""

import logging

from bleak import BleakClient
from bleak.exc import BleakError

from thermalabel.models.printer import BluetoothConnection
from thermalabel.transports.base import BaseTransport, NotConnectedError, TransportError

logger = logging.getLogger(__name__)


class BluetoothTransport(BaseTransport):
    """Writes to a BLE write characteristic using bleak.

    Writes go out without response; if the characteristic rejects that,
    the same block is retried with response.
    """

    def __init__(self, conn: BluetoothConnection, name: str = "bluetooth") -> None:
        super().__init__(name)
        self.conn = conn
        self._client: BleakClient | None = None

    @property
    def is_connected(self) -> bool:
        return self._connected and self._client is not None and self._client.is_connected

    async def connect(self) -> None:
        """Connect to the device address."""
        if self.is_connected:
            return
        client = BleakClient(self.conn.address, timeout=self.conn.timeout)
        try:
            await client.connect()
        except (BleakError, TimeoutError) as e:
            raise TransportError(f"Failed to connect to {self.conn.address}: {e}") from e

        self._client = client
        self._connected = True
        logger.info(f"Transport {self.name}: connected to {self.conn.address}")

    async def disconnect(self) -> None:
        """Disconnect from the device."""
        if self._client:
            try:
                await self._client.disconnect()
            except BleakError as e:
                logger.debug(f"Transport {self.name}: error while disconnecting - {e}")
            self._client = None
        self._connected = False

    async def write(self, data: bytes) -> None:
        """Write one block to the write characteristic."""
        if not self.is_connected or self._client is None:
            raise NotConnectedError("Bluetooth device not connected")

        char_uuid = self.conn.write_characteristic
        try:
            await self._client.write_gatt_char(char_uuid, data, response=False)
            return
        except BleakError as e:
            logger.warning(f"Transport {self.name}: write without response failed, retrying with response - {e}")

        try:
            await self._client.write_gatt_char(char_uuid, data, response=True)
        except BleakError as e:
            raise TransportError(f"Bluetooth write failed: {e}") from e
