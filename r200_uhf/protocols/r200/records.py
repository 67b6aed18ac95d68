# r200_uhf/protocols/r200/records.py

"""Domain values decoded from R200 response payloads."""

import struct
from dataclasses import dataclass, field
from enum import Enum

from r200_uhf.protocols.r200 import constants as r200_const
from r200_uhf.core.exceptions import FrameParseError, InvalidWorkingAreaError


class WorkingArea(Enum):
    """Regulatory working area configured on the module."""
    CHINA_900MHZ = r200_const.AREA_CHINA_900MHZ
    CHINA_800MHZ = r200_const.AREA_CHINA_800MHZ
    US = r200_const.AREA_US
    EU = r200_const.AREA_EU
    KOREA = r200_const.AREA_KOREA

    @classmethod
    def from_code(cls, code: int) -> "WorkingArea":
        try:
            return cls(code)
        except ValueError:
            raise InvalidWorkingAreaError(code) from None

    def channel_frequency(self, channel_index: int) -> float:
        """Returns the centre frequency in MHz of a channel index in this area."""
        step, base = r200_const.AREA_CHANNEL_PLAN[self.value]
        return channel_index * step + base

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class TagRecord:
    """
    One tag detection parsed from an inventory payload.

    Two records are the same tag when their EPC bytes match, whatever the
    RSSI, PC or CRC, so a ``set`` of records keeps one entry per tag.
    """
    rssi: int = field(compare=False)
    pc: int = field(compare=False)
    epc: bytes
    crc: int = field(compare=False)
    raw: bytes = field(default=b'', compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: bytes) -> "TagRecord":
        """
        Parses an inventory payload: RSSI (1), PC (2), EPC (12), CRC (2).

        Raises:
            FrameParseError: If the payload is shorter than 17 bytes.
        """
        if len(payload) < r200_const.TAG_PAYLOAD_MIN_LENGTH:
            raise FrameParseError(
                f"Tag payload length {len(payload)} is less than {r200_const.TAG_PAYLOAD_MIN_LENGTH} bytes.",
                frame_part=bytes(payload)
            )
        rssi = payload[r200_const.TAG_RSSI_OFFSET]
        (pc,) = struct.unpack_from('>H', payload, r200_const.TAG_PC_OFFSET)
        epc = bytes(payload[r200_const.TAG_EPC_OFFSET:r200_const.TAG_EPC_OFFSET + r200_const.TAG_EPC_LENGTH])
        (crc,) = struct.unpack_from('>H', payload, r200_const.TAG_CRC_OFFSET)
        return cls(rssi=rssi, pc=pc, epc=epc, crc=crc, raw=bytes(payload))

    @property
    def uid(self) -> str:
        """The EPC as a lower-case hex string."""
        return self.epc.hex()

    def __str__(self):
        return f"RSSI: {self.rssi}, PC: {self.pc}, EPC(UID): {self.uid}, CRC: {self.crc}"
