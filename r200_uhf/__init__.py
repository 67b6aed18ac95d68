"""R200 UHF RFID - Serial protocol driver for the R200 UHF RFID reader module."""

from .core import (
    ProtocolSession,
    ModuleInfo,
    FrameAssembler,
    UhfRfidError,
    TransportError,
    ReadError,
    WriteError,
    TimeoutError,
    ProtocolError,
    FrameParseError,
    ChecksumError,
    InvalidCommandError,
    InvalidWorkingAreaError,
    NoPacketReceivedError,
)
from .transport import (
    SerialTransport,
    MockTransport,
)
from .protocols.framing import Packet, build_frame
from .protocols.r200.records import TagRecord, WorkingArea

__version__ = '0.1.0'

__all__ = [
    # Core components
    'ProtocolSession',
    'ModuleInfo',
    'FrameAssembler',
    # Exceptions
    'UhfRfidError',
    'TransportError',
    'ReadError',
    'WriteError',
    'TimeoutError',
    'ProtocolError',
    'FrameParseError',
    'ChecksumError',
    'InvalidCommandError',
    'InvalidWorkingAreaError',
    'NoPacketReceivedError',
    # Transport
    'SerialTransport',
    'MockTransport',
    # Protocol
    'Packet',
    'build_frame',
    'TagRecord',
    'WorkingArea',
]
