# r200_uhf/protocols/framing.py

import struct

from r200_uhf.protocols.r200 import constants as r200_const
from r200_uhf.protocols.r200 import commands
from r200_uhf.protocols.r200.commands import Command
from r200_uhf.core.exceptions import FrameParseError, ChecksumError

# --- Checksum Calculation ---

def calculate_checksum(data: bytes) -> int:
    """
    Calculates the R200 protocol checksum for the given data buffer.

    The checksum is the low byte of the sum of every byte from the opcode
    through the last parameter (or data) byte.

    Args:
        data: The byte sequence (Opcode through Parameters).

    Returns:
        The calculated checksum byte (as an integer 0-255).
    """
    return sum(data) & 0xFF

# --- Frame Building ---

def build_frame(command: Command) -> bytes:
    """
    Constructs a complete host-to-module R200 frame for a command.

    Layout: HEADER, DIRECTION (0x00), OPCODE, LEN_HI, LEN_LO, PARAMS,
    CHECKSUM, END.

    Args:
        command: The command to encode.

    Returns:
        The complete byte frame including checksum and end marker.

    Raises:
        ValueError: If a command parameter is outside its valid range.
    """
    opcode, parameters = commands.encode(command)

    param_len = len(parameters)
    if not (0x0000 <= param_len <= 0xFFFF):
        raise ValueError(f"Parameter length {param_len} exceeds maximum allowed (65535 bytes).")

    # > = Big-endian, B = unsigned char, H = unsigned short
    body = struct.pack('>BH', opcode, param_len) + parameters
    checksum = calculate_checksum(body)
    return (
        struct.pack('>BB', r200_const.FRAME_HEADER, r200_const.DIRECTION_COMMAND)
        + body
        + struct.pack('>BB', checksum, r200_const.FRAME_END)
    )

# --- Frame Parsing ---

class Packet:
    """
    Decoded view of one inbound frame chunk (HEADER..END inclusive).

    The raw chunk is kept as received. Field accessors read fixed offsets;
    ``is_valid`` checks that the chunk length agrees with the declared
    payload length.
    """

    def __init__(self, raw: bytes):
        if len(raw) < r200_const.PAYLOAD_OFFSET:
            raise FrameParseError(
                f"Chunk length {len(raw)} is less than the {r200_const.PAYLOAD_OFFSET} fixed header bytes.",
                frame_part=bytes(raw)
            )
        self._raw = bytes(raw)

    @property
    def raw(self) -> bytes:
        return self._raw

    @property
    def direction(self) -> int:
        return self._raw[1]

    @property
    def opcode(self) -> int:
        return self._raw[2]

    @property
    def declared_length(self) -> int:
        return struct.unpack('>H', self._raw[3:5])[0]

    @property
    def payload(self) -> bytes:
        start = r200_const.PAYLOAD_OFFSET
        return self._raw[start:start + self.declared_length]

    @property
    def checksum(self) -> int:
        return self._raw[-2]

    def is_valid(self, verify_checksum: bool = False) -> bool:
        """
        Returns True if the chunk length equals header + declared length + trailer.

        With ``verify_checksum`` the checksum byte must also match the sum of
        the opcode through the last payload byte.
        """
        expected_length = r200_const.PAYLOAD_OFFSET + self.declared_length + r200_const.TRAILER_LENGTH
        if expected_length != len(self._raw):
            return False
        if verify_checksum:
            return self.calculated_checksum() == self.checksum
        return True

    def calculated_checksum(self) -> int:
        return calculate_checksum(self._raw[2:-r200_const.TRAILER_LENGTH])

    def verify_checksum(self) -> None:
        """Raises ChecksumError if the received checksum does not match."""
        calculated = self.calculated_checksum()
        if calculated != self.checksum:
            raise ChecksumError(calculated, self.checksum, self._raw)

    def command(self) -> Command:
        """
        Maps this packet back to the command it answers.

        Raises:
            InvalidCommandError: If the opcode/sub-code pair is unknown.
        """
        if len(self._raw) <= r200_const.PAYLOAD_OFFSET:
            raise FrameParseError("Chunk has no byte after the length field.", frame_part=self._raw)
        # With an empty payload this byte is the checksum; decode ignores it
        # for every opcode except module info.
        return commands.decode(self.opcode, self._raw[r200_const.PAYLOAD_OFFSET])

    def debug(self) -> str:
        return (
            f"Direction: {self.direction:02X}, Opcode: {self.opcode:02X}, "
            f"Length: {self.declared_length} - Payload: {self.payload.hex(' ').upper()}"
        )

    def __str__(self):
        try:
            return self.payload.decode('utf-8')
        except UnicodeDecodeError:
            return "Invalid UTF-8"

    def __repr__(self):
        return f"Packet({self._raw.hex(' ').upper()})"

    def __eq__(self, other):
        if not isinstance(other, Packet):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self):
        return hash(self._raw)
