"""Abstract base class for printer byte transports."""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class BaseTransport(ABC):
    """Abstract byte pipe to a printer.

    Implementations only move bytes; pacing and chunking policy live in
    thermalabel.transports.chunker.
    """

    def __init__(self, name: str = "transport") -> None:
        self.name = name
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Check if the transport is currently connected."""
        return self._connected

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection.

        Raises:
            TransportError: If the connection cannot be established.
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection."""
        pass

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """Write one block of bytes.

        Args:
            data: Bytes to send in a single write.

        Raises:
            NotConnectedError: If not connected.
            TransportError: If the write fails.
        """
        pass

    async def __aenter__(self) -> "BaseTransport":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()


class TransportError(Exception):
    """Exception raised when sending bytes to the printer fails.

    Attributes:
        chunk_index: Index of the chunk being written, if known.
        offset: Byte offset of that chunk within the stream, if known.
    """

    def __init__(self, message: str, chunk_index: int | None = None, offset: int | None = None) -> None:
        super().__init__(message)
        self.chunk_index = chunk_index
        self.offset = offset


class NotConnectedError(TransportError):
    """Exception raised when no transport connection is available."""

    pass
