"""Transport implementations for the R200 UHF RFID library."""

from .base import BaseTransport
from .serial_transport import SerialTransport
from .mock import MockTransport

__all__ = [
    'BaseTransport',
    'SerialTransport',
    'MockTransport',
]
