"""Core components of the R200 UHF RFID library."""

from .assembler import FrameAssembler
from .session import ProtocolSession, ModuleInfo
from .exceptions import (
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

__all__ = [
    'FrameAssembler',
    'ProtocolSession',
    'ModuleInfo',
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
]
