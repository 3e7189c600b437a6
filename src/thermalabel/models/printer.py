"""Printer configuration models."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class SerialConnection(BaseModel):
    """Serial port connection configuration (including RFCOMM devices)."""

    type: Literal["serial"] = "serial"
    device: str
    baudrate: int = 115200
    bytesize: int = 8
    parity: str = "N"
    stopbits: float = 1


class TCPConnection(BaseModel):
    """Raw TCP socket connection configuration."""

    type: Literal["tcp"] = "tcp"
    host: str
    port: int = 9100


class BluetoothConnection(BaseModel):
    """Bluetooth LE connection to a printer with a known address."""

    type: Literal["bluetooth"] = "bluetooth"
    address: str
    # M110/M120 write characteristic
    write_characteristic: str = "0000ff02-0000-1000-8000-00805f9b34fb"
    timeout: float = 20.0


ConnectionConfig = Annotated[
    SerialConnection | TCPConnection | BluetoothConnection,
    Field(discriminator="type"),
]


class PrinterConfig(BaseModel):
    """Configuration for the label printer and its transmission pacing."""

    name: str = "printer"
    connection: ConnectionConfig
    chunk_size: int = Field(default=100, gt=0)  # Bytes per transport write
    chunk_delay: float = Field(default=0.03, ge=0)  # Seconds between chunks
    copy_delay: float = Field(default=0.5, ge=0)  # Seconds between copies
    feed_mm: float = Field(default=4.0, ge=0)  # Feed after each label
