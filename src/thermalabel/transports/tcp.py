"""Raw TCP socket transport."""

import asyncio
import logging

from thermalabel.models.printer import TCPConnection
from thermalabel.transports.base import BaseTransport, NotConnectedError, TransportError

logger = logging.getLogger(__name__)


class TCPTransport(BaseTransport):
    """Writes to a printer (or print bridge) over a TCP socket."""

    def __init__(self, conn: TCPConnection, name: str = "tcp") -> None:
        super().__init__(name)
        self.conn = conn
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None

    async def connect(self) -> None:
        """Open the TCP connection."""
        if self._connected:
            return
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self.conn.host, self.conn.port),
                timeout=5.0,
            )
        except TimeoutError as e:
            raise TransportError(f"Timeout connecting to {self.conn.host}:{self.conn.port}") from e
        except OSError as e:
            raise TransportError(f"Failed to connect to {self.conn.host}:{self.conn.port}: {e}") from e

        self._connected = True
        logger.info(f"Transport {self.name}: connected to {self.conn.host}:{self.conn.port}")

    async def disconnect(self) -> None:
        """Close the TCP connection."""
        if self._writer:
            self._writer.close()
            try:
                await self._writer.wait_closed()
            except OSError as e:
                logger.debug(f"Transport {self.name}: error while closing - {e}")
            self._writer = None
            self._reader = None
        self._connected = False

    async def write(self, data: bytes) -> None:
        """Write data and wait for the socket buffer to drain."""
        if not self._connected or not self._writer:
            raise NotConnectedError("TCP connection not open")

        try:
            self._writer.write(data)
            await self._writer.drain()
        except OSError as e:
            self._connected = False
            raise TransportError(f"TCP write failed: {e}") from e
