# r200_uhf/protocols/r200/commands.py

"""
Logical commands of the R200 protocol and their wire mapping.

Each command is a small immutable dataclass. ``encode`` maps a command to
its (opcode, parameter bytes) pair; ``decode`` maps an (opcode, first
parameter byte) pair back to a command.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Optional, Tuple

from r200_uhf.protocols.r200 import constants as r200_const
from r200_uhf.core.exceptions import InvalidCommandError

logger = logging.getLogger(__name__)


class Command:
    """Base class of all R200 commands."""
    name = "Command"

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class HardwareVersion(Command):
    name = "Hardware Version"


@dataclass(frozen=True)
class SoftwareVersion(Command):
    name = "Software Version"


@dataclass(frozen=True)
class Manufacturer(Command):
    name = "Manufacturer"


@dataclass(frozen=True)
class GetWorkingArea(Command):
    name = "Get Working Area"


@dataclass(frozen=True)
class GetWorkingChannel(Command):
    name = "Get Working Channel"


@dataclass(frozen=True)
class AcquireTransmitPower(Command):
    name = "Acquire Transmit Power"


@dataclass(frozen=True)
class SetTransmissionPower(Command):
    power: float
    name = "Set Transmission Power"

    def __str__(self):
        return f"Set transmission power to {self.power}"


@dataclass(frozen=True)
class SinglePollingInstruction(Command):
    name = "Single Polling Instruction"


@dataclass(frozen=True)
class MultiplePollingInstruction(Command):
    max_count: int = r200_const.DEFAULT_MULTI_POLL_COUNT
    name = "Multiple Polling Instruction"

    def __str__(self):
        return f"Multiple Polling Instruction [max: {self.max_count} times]"


@dataclass(frozen=True)
class StopMultiplePollingInstruction(Command):
    name = "Stop Multiple Polling Instruction"


_MODULE_INFO_SUB_CODES = {
    HardwareVersion: r200_const.MODULE_INFO_HARDWARE_VERSION,
    SoftwareVersion: r200_const.MODULE_INFO_SOFTWARE_VERSION,
    Manufacturer: r200_const.MODULE_INFO_MANUFACTURER,
}

_PARAMETERLESS_OPCODES = {
    GetWorkingArea: r200_const.CMD_GET_WORKING_AREA,
    GetWorkingChannel: r200_const.CMD_GET_WORKING_CHANNEL,
    AcquireTransmitPower: r200_const.CMD_GET_TRANSMIT_POWER,
    SinglePollingInstruction: r200_const.CMD_SINGLE_POLLING,
    StopMultiplePollingInstruction: r200_const.CMD_STOP_MULTIPLE_POLLING,
}


def _encode_u16(value: int, what: str) -> bytes:
    if not (0 <= value <= r200_const.MAX_U16):
        raise ValueError(f"Invalid {what}: {value}. Must be between 0 and {r200_const.MAX_U16}.")
    return struct.pack('>H', value)


def power_to_wire(power: float) -> int:
    """Converts a transmit power to the hundredths value sent on the wire."""
    return int(round(power * r200_const.POWER_SCALE))


def encode(command: Command) -> Tuple[int, bytes]:
    """
    Maps a command to its wire opcode and parameter bytes.

    Args:
        command: Any Command instance.

    Returns:
        A tuple (opcode, parameters). Parameters may be empty.

    Raises:
        ValueError: If a numeric parameter does not fit in an unsigned 16-bit field.
        TypeError: If the argument is not a known command.
    """
    command_type = type(command)
    if command_type in _MODULE_INFO_SUB_CODES:
        return r200_const.CMD_MODULE_INFO, bytes([_MODULE_INFO_SUB_CODES[command_type]])
    if command_type in _PARAMETERLESS_OPCODES:
        return _PARAMETERLESS_OPCODES[command_type], b''
    if isinstance(command, SetTransmissionPower):
        return r200_const.CMD_SET_TRANSMIT_POWER, _encode_u16(power_to_wire(command.power), "transmit power")
    if isinstance(command, MultiplePollingInstruction):
        return r200_const.CMD_MULTIPLE_POLLING, _encode_u16(command.max_count, "max_count")
    raise TypeError(f"Unsupported command type: {command_type.__name__}")


def decode(opcode: int, first_param: Optional[int] = None) -> Command:
    """
    Maps an opcode and its first parameter byte back to a command.

    Only the module info opcode looks at ``first_param``; the working area,
    working channel and transmit power query opcodes ignore it.

    Raises:
        InvalidCommandError: If the combination is not recognized.
    """
    if opcode == r200_const.CMD_MODULE_INFO:
        for command_type, sub_code in _MODULE_INFO_SUB_CODES.items():
            if first_param == sub_code:
                return command_type()
        raise InvalidCommandError(opcode, first_param)
    if opcode == r200_const.CMD_GET_WORKING_CHANNEL:
        return GetWorkingChannel()
    if opcode == r200_const.CMD_GET_WORKING_AREA:
        return GetWorkingArea()
    if opcode == r200_const.CMD_GET_TRANSMIT_POWER:
        return AcquireTransmitPower()
    logger.debug(f"No command mapping for opcode 0x{opcode:02X}")
    raise InvalidCommandError(opcode)
