"""Paced, MTU-safe chunked transmission."""

import asyncio
import logging
from collections.abc import Callable

from thermalabel.transports.base import BaseTransport, NotConnectedError, TransportError

logger = logging.getLogger(__name__)

# Conservative BLE payload size
DEFAULT_CHUNK_SIZE = 100
DEFAULT_CHUNK_DELAY = 0.03


def iter_chunks(data: bytes, chunk_size: int) -> list[bytes]:
    """Split data into consecutive chunks of at most chunk_size bytes."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return [data[i : i + chunk_size] for i in range(0, len(data), chunk_size)]


async def send_chunked(
    transport: BaseTransport,
    data: bytes,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_delay: float = DEFAULT_CHUNK_DELAY,
    on_progress: Callable[[float], None] | None = None,
) -> None:
    """Write data to the transport in sequential, paced chunks.

    Only one chunk is in flight at a time. The delay is applied between
    chunks, not after the last one. Cancellation takes effect at the
    current write or delay.

    Args:
        transport: Connected transport.
        data: Full byte stream.
        chunk_size: Maximum bytes per write.
        chunk_delay: Seconds to wait between chunks.
        on_progress: Optional callback with the fraction of bytes sent (0-1).

    Raises:
        TransportError: If the connection drops or a write fails; carries
            the chunk index and byte offset.
    """
    chunks = iter_chunks(data, chunk_size)
    total = len(data)
    logger.debug(f"Writing {total} bytes in {len(chunks)} chunks ({chunk_size} bytes/chunk)")

    sent = 0
    for index, chunk in enumerate(chunks):
        if not transport.is_connected:
            raise NotConnectedError(
                f"Transport {transport.name} disconnected at chunk {index} (byte {sent})",
                chunk_index=index,
                offset=sent,
            )

        try:
            await transport.write(chunk)
        except TransportError as e:
            raise TransportError(
                f"Write failed at chunk {index + 1}/{len(chunks)} (byte {sent}): {e}",
                chunk_index=index,
                offset=sent,
            ) from e

        sent += len(chunk)
        if on_progress:
            on_progress(sent / total)

        if index < len(chunks) - 1 and chunk_delay > 0:
            await asyncio.sleep(chunk_delay)

    logger.debug(f"All {len(chunks)} chunks sent")

