"""Pytest configuration and fixtures."""

import pytest

from thermalabel.transports.base import BaseTransport, NotConnectedError, TransportError


class MockTransport(BaseTransport):
    """In-memory transport that records every write."""

    def __init__(self, connected: bool = True, fail_at: int | None = None, drop_after: int | None = None):
        super().__init__("mock")
        self._connected = connected
        self.fail_at = fail_at  # Index of the write that raises
        self.drop_after = drop_after  # Disconnect after this many writes
        self.writes: list[bytes] = []

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def write(self, data: bytes) -> None:
        if not self._connected:
            raise NotConnectedError("mock not connected")
        if self.fail_at is not None and len(self.writes) == self.fail_at:
            raise TransportError("simulated write failure")
        self.writes.append(bytes(data))
        if self.drop_after is not None and len(self.writes) >= self.drop_after:
            self._connected = False

    @property
    def data(self) -> bytes:
        return b"".join(self.writes)


@pytest.fixture
def transport() -> MockTransport:
    """Create a connected mock transport."""
    return MockTransport()


@pytest.fixture
def anyio_backend():
    """Use asyncio for async tests."""
    return "asyncio"
