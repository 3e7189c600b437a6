"""Byte transports to the printer."""

from thermalabel.models.printer import BluetoothConnection, PrinterConfig, SerialConnection, TCPConnection
from thermalabel.transports.base import BaseTransport, NotConnectedError, TransportError
from thermalabel.transports.chunker import send_chunked

__all__ = [
    "BaseTransport",
    "NotConnectedError",
    "TransportError",
    "create_transport",
    "send_chunked",
]


def create_transport(config: PrinterConfig) -> BaseTransport:
    """Factory function to create a transport from printer config."""
    conn = config.connection
    if isinstance(conn, SerialConnection):
        from thermalabel.transports.serial_port import SerialTransport

        return SerialTransport(conn, name=config.name)
    if isinstance(conn, TCPConnection):
        from thermalabel.transports.tcp import TCPTransport

        return TCPTransport(conn, name=config.name)
    if isinstance(conn, BluetoothConnection):
        from thermalabel.transports.bluetooth import BluetoothTransport

        return BluetoothTransport(conn, name=config.name)
    raise ValueError(f"Unknown connection type: {type(conn)}")
