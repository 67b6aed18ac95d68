# r200_uhf/core/exceptions.py

"""Custom exceptions for the r200_uhf library."""

from typing import Optional


def _hex_excerpt(data: bytes, limit: int = 32) -> str:
    return f"{data[:limit].hex(' ').upper()}{'...' if len(data) > limit else ''}"


class UhfRfidError(Exception):
    """Base exception class for all r200_uhf errors."""
    def __init__(self, message="An unspecified RFID error occurred."):
        super().__init__(message)


# --- Transport Layer Exceptions ---

class TransportError(UhfRfidError):
    """
    Base exception for errors related to the communication transport layer
    (Serial, Mock). It often wraps a lower-level exception.
    """
    def __init__(self, message="Transport layer error.", original_exception: Optional[Exception] = None):
        """
        Args:
            message: A description of the transport error.
            original_exception: The underlying exception that caused this error (e.g., from pyserial).
        """
        super().__init__(message)
        self.original_exception = original_exception

    def __str__(self):
        base_msg = super().__str__()
        if self.original_exception:
            orig_exc_type = type(self.original_exception).__name__
            orig_exc_msg = str(self.original_exception)
            return f"{base_msg} Original exception: [{orig_exc_type}] {orig_exc_msg}"
        return base_msg


class ConnectionError(TransportError):
    """
    Exception raised when establishing a connection fails.
    This is more specific than a general TransportError during an active connection.
    """
    def __init__(self, message="Failed to establish connection.", original_exception: Optional[Exception] = None):
        super().__init__(message, original_exception)


class SerialConnectionError(ConnectionError):
    """
    Specific connection error related to Serial transport.
    Common reasons include:
    - Port does not exist.
    - Insufficient permissions to access the port.
    - Port is already in use by another application.
    """
    def __init__(self, port: Optional[str] = None, message="Serial connection error.", original_exception: Optional[Exception] = None):
        msg = "Serial connection error"
        if port:
            msg += f" on port '{port}'"
        msg += f": {message}"
        super().__init__(msg, original_exception)
        self.port = port


class ReadError(TransportError):
    """Exception raised when reading data from the transport fails for a reason other than a timeout."""
    def __init__(self, message="Failed to read data from transport.", original_exception: Optional[Exception] = None):
        super().__init__(message, original_exception)


class WriteError(TransportError):
    """Exception raised when writing or flushing data to the transport fails."""
    def __init__(self, message="Failed to write data to transport.", original_exception: Optional[Exception] = None):
        super().__init__(message, original_exception)


class TimeoutError(TransportError):
    """
    Exception raised when no response was collected within the configured
    read timeout. Raised by the transport for a single empty read window,
    and by the frame assembler when such a window closes before any frame
    has been collected.
    """
    def __init__(self, message="Operation timed out waiting for reader response.", original_exception: Optional[Exception] = None):
        super().__init__(message, original_exception)


# --- Protocol Layer Exceptions ---

class ProtocolError(UhfRfidError):
    """Exception related to protocol framing, parsing, or validation."""
    def __init__(self, message="Protocol error."):
        super().__init__(message)


class ChecksumError(ProtocolError):
    """Exception raised when frame checksum validation fails."""
    def __init__(self, calculated_checksum: int, received_checksum: int, frame: bytes):
        message = (
            f"Checksum mismatch. Calculated: 0x{calculated_checksum:02X}, "
            f"Received: 0x{received_checksum:02X}."
            f" Frame (hex): {_hex_excerpt(frame)}"
        )
        super().__init__(message)
        self.calculated_checksum = calculated_checksum
        self.received_checksum = received_checksum
        self.frame = frame


class FrameParseError(ProtocolError):
    """
    Exception raised when a frame or a response payload is too short, or
    otherwise malformed, for the fixed-offset fields being decoded.
    """
    def __init__(self, message="Failed to parse frame structure.", frame_part: Optional[bytes] = None):
        msg = f"Frame parsing error: {message}"
        if frame_part:
            msg += f" Near bytes: {_hex_excerpt(frame_part)}"
        super().__init__(msg)
        self.frame_part = frame_part


class InvalidCommandError(ProtocolError):
    """Exception raised when an opcode/sub-code combination maps to no known command."""
    def __init__(self, opcode: int, sub_code: Optional[int] = None):
        if sub_code is not None:
            message = f"Invalid command: opcode 0x{opcode:02X} with sub-code 0x{sub_code:02X}"
        else:
            message = f"Invalid command: opcode 0x{opcode:02X}"
        super().__init__(message)
        self.opcode = opcode
        self.sub_code = sub_code


class InvalidWorkingAreaError(ProtocolError):
    """Exception raised when the module reports a working area code outside the known table."""
    def __init__(self, area_code: int):
        super().__init__(f"Invalid working area code reported by module: {area_code}")
        self.area_code = area_code


# --- Command/Reader Logic Exceptions ---

class NoPacketReceivedError(UhfRfidError):
    """
    Exception raised when an operation required a response payload and none
    arrived, or when an acknowledgement byte was not the expected value.
    """
    def __init__(self, message="No packet received from reader.", packet: Optional[bytes] = None):
        super().__init__(message)
        self.packet = packet

    def __str__(self):
        base_message = super().__str__()
        if self.packet:
            return f"{base_message} Packet (hex): {_hex_excerpt(self.packet)}"
        return base_message
